from typing import Any, List, Tuple

from fhir.resources.R4B.diagnosticreport import DiagnosticReport

from app.models.backend.types import BackendRecord
from app.models.fhir.types import EXTENSION_BASE_URL
from app.services.fhir.encoders.common import (
    as_fhir_datetime,
    codeable_concept,
    compact,
    temporary_id,
)
from app.services.fhir.model_factory import create_model
from app.services.fhir.references.reference_misc import build_reference
from app.services.mapping.extension_codec import build_extensions
from app.services.mapping.field_extractor import get, get_str

DEFAULT_REPORT_TITLE = "Reporte de Diagnóstico"
ANNEX_TITLE = "Comentario"

REPORT_EXTENSION_FIELDS: List[Tuple[str, str]] = [
    ("report-hash-id", "hash_id"),
    ("user-name", "nombre_usuario"),
    ("user-lastname", "apellido_usuario"),
    ("user-dni", "dni_usuario"),
    ("report-type-name", "nombre_tipo_informe"),
    ("user-id", "id_usuario"),
    ("report-type-id", "id_tipo_informe"),
    ("ehr-id", "id_historia_clinica"),
]


def unwrap_report(record: BackendRecord) -> BackendRecord:
    """
    Some report listings wrap every item in a "report" key.
    """
    inner = record.get("report")
    return inner if isinstance(inner, dict) else record


def encode_report(
    record: BackendRecord,
    patient_id: str | None = None,
    base_url: str = EXTENSION_BASE_URL,
) -> DiagnosticReport:
    record = unwrap_report(record)
    patient_id = patient_id or get_str(record, "hash_id_paciente", "patient_hash_id")

    values: List[Tuple[str, Any]] = [
        (key, get_str(record, backend_key)) for key, backend_key in REPORT_EXTENSION_FIELDS
    ]

    data = compact({
        "resourceType": "DiagnosticReport",
        "id": get_str(record, "id_informe", "id") or temporary_id("report"),
        "status": "final",
        "code": codeable_concept(text=get_str(record, "titulo") or DEFAULT_REPORT_TITLE),
        "subject": build_reference("Patient", patient_id) if patient_id else None,
        "effectiveDateTime": as_fhir_datetime(get(record, "fecha_creacion")),
        "conclusion": get_str(record, "reporte"),
        "extension": build_extensions(values, base_url),
    })

    return create_model(DiagnosticReport, data)


def encode_annex(
    record: BackendRecord,
    parent_id: str,
    base_url: str = EXTENSION_BASE_URL,
) -> DiagnosticReport:
    created = get_str(record, "fecha_creacion")

    values: List[Tuple[str, Any]] = [
        ("is-annex", True),
        ("annex-id", get_str(record, "id_anexo")),
        ("report-type-id", get_str(record, "id_informe")),
        ("user-id", get_str(record, "id_usuario")),
        ("report-hash-id", parent_id),
        ("user-name", get_str(record, "nombre_usuario")),
        ("user-lastname", get_str(record, "apellido_usuario")),
    ]

    data = compact({
        "resourceType": "DiagnosticReport",
        "id": get_str(record, "hash_id") or temporary_id("annex"),
        "status": "final",
        "code": codeable_concept(text=f"{ANNEX_TITLE} - {created}" if created else ANNEX_TITLE),
        "subject": build_reference("DiagnosticReport", parent_id),
        "effectiveDateTime": as_fhir_datetime(get(record, "fecha_creacion")),
        "conclusion": get_str(record, "reporte"),
        "extension": build_extensions(values, base_url),
    })

    return create_model(DiagnosticReport, data)
