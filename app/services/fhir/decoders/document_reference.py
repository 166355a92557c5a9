from fhir.resources.R4B.documentreference import DocumentReference

from app.exceptions import ValidationError
from app.models.backend.types import BackendRecord
from app.services.fhir.decoders.common import drop_none
from app.services.fhir.references.reference_misc import reference_id
from app.services.mapping.extension_codec import find_str


def decode_upload_metadata(document: DocumentReference) -> BackendRecord:
    """
    Form fields sent along with an uploaded file. The patient is required, the rest is optional.
    """
    patient_id = reference_id(document.subject, "Patient") or find_str(
        document.extension, "patient-hash-id"
    )
    if not patient_id:
        raise ValidationError(
            "The patient is required, set subject to Patient/<id> or the patient-hash-id extension"
        )

    return drop_none({
        "hash_id": patient_id,
        "userId": find_str(document.extension, "user-id"),
        "reportId": find_str(document.extension, "report-id"),
        "titulo": find_str(document.extension, "file-title") or document.description,
        "descripcion": find_str(document.extension, "file-description"),
    })
