from fhir.resources.R4B.diagnosticreport import DiagnosticReport

from app.exceptions import ValidationError
from app.models.backend.types import BackendRecord
from app.services.fhir.references.reference_misc import reference_id
from app.services.mapping.extension_codec import index_by_key
from app.services.mapping.group_mapper import unflatten
from app.services.mapping.schemas.fisiatric_history import FISIATRIC_HISTORY_SCHEMA


def decode_fisiatric_history(
    report: DiagnosticReport, patient_id: str | None = None
) -> BackendRecord:
    """
    Rebuilds the nested history the create endpoint expects from the flat extensions. Every
    field of the schema is sent, missing ones as an empty string.
    """
    patient_id = reference_id(report.subject, "Patient") or patient_id
    if not patient_id:
        raise ValidationError("A fisiatric history needs a subject Patient/<id>")

    index = index_by_key(report.extension, FISIATRIC_HISTORY_SCHEMA.namespace_keys)
    return {
        "hash_id": patient_id,
        "hc_fisiatric": unflatten(index, FISIATRIC_HISTORY_SCHEMA),
    }
