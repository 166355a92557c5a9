import logging
from typing import Any, Dict

from fhir.resources.R4B.diagnosticreport import DiagnosticReport

from app.exceptions import MappingError
from app.models.backend.types import BackendRecord
from app.models.fhir.types import EXTENSION_BASE_URL, LOINC_SYSTEM
from app.services.fhir.encoders.common import (
    as_fhir_datetime,
    codeable_concept,
    compact,
    join_blocks,
    temporary_id,
)
from app.services.fhir.model_factory import create_model
from app.services.fhir.references.reference_misc import build_reference
from app.services.mapping.extension_codec import to_extension
from app.services.mapping.field_extractor import (
    camelize_keys,
    get,
    get_str,
    parse_json_object,
)
from app.services.mapping.group_mapper import flatten, render_sections
from app.services.mapping.schemas.fisiatric_history import (
    FISIATRIC_HISTORY_SCHEMA,
    SECTION_KEYS,
)

logger = logging.getLogger(__name__)

HISTORY_TITLE = "Historia Clínica Fisiátrica"
HISTORY_HEADER = "HISTORIA CLÍNICA FISIÁTRICA"
HISTORY_LOINC_CODE = "11450-4"
HISTORY_LOINC_DISPLAY = "Problem List Reported"
HISTORY_TYPE = "fisiatrica"


def extract_sections(record: BackendRecord) -> Dict[str, Any]:
    """
    Collects the nested sections of a stored history under their camelCase names. A section that
    is not a valid object is logged and left out, the rest of the history is still returned.
    """
    sections: Dict[str, Any] = {}
    for name, keys in SECTION_KEYS.items():
        raw = get(record, *keys)
        if raw is None:
            continue
        try:
            sections[name] = camelize_keys(parse_json_object(raw))
        except MappingError as e:
            logger.warning("Dropping section %s of history: %s", name, e.message)

    return sections


def encode_fisiatric_history(
    record: BackendRecord,
    patient_id: str | None = None,
    base_url: str = EXTENSION_BASE_URL,
) -> DiagnosticReport:
    sections = extract_sections(record)
    patient_id = patient_id or get_str(record, "hash_id_paciente")

    narrative = join_blocks([HISTORY_HEADER, *render_sections(sections, FISIATRIC_HISTORY_SCHEMA)])

    data = compact({
        "resourceType": "DiagnosticReport",
        "id": get_str(record, "id_hc_fisiatrica", "hash_id") or temporary_id("ehr"),
        "status": "final",
        "code": codeable_concept(
            text=HISTORY_TITLE,
            system=LOINC_SYSTEM,
            code=HISTORY_LOINC_CODE,
            display=HISTORY_LOINC_DISPLAY,
        ),
        "subject": build_reference("Patient", patient_id) if patient_id else None,
        "effectiveDateTime": as_fhir_datetime(get(record, "fecha_creacion")),
        "conclusion": narrative,
        "extension": [
            to_extension("historia-tipo", HISTORY_TYPE, base_url),
            *flatten(sections, FISIATRIC_HISTORY_SCHEMA, base_url),
        ],
    })

    return create_model(DiagnosticReport, data)
