from typing import Any, List, Tuple

from fhir.resources.R4B.documentreference import DocumentReference

from app.models.backend.types import BackendRecord
from app.models.fhir.types import EXTENSION_BASE_URL
from app.services.fhir.encoders.common import codeable_concept, compact, temporary_id
from app.services.fhir.model_factory import create_model
from app.services.fhir.references.reference_misc import build_reference
from app.services.mapping.extension_codec import build_extensions
from app.services.mapping.field_extractor import get_str

DEFAULT_FILE_TYPE = "Archivo"


def encode_document_reference(
    record: BackendRecord,
    patient_id: str | None = None,
    base_url: str = EXTENSION_BASE_URL,
) -> DocumentReference:
    file_type = get_str(record, "type", "fileType")
    url = get_str(record, "url", "fileUrl")
    name = get_str(record, "name", "fileName")
    title = get_str(record, "titulo")

    attachment = compact({
        "url": url,
        "title": name or title or DEFAULT_FILE_TYPE,
        "contentType": get_str(record, "mimetype", "contentType"),
    })

    values: List[Tuple[str, Any]] = [
        ("file-type", file_type),
        ("file-url", url),
        ("file-name", name),
        ("file-title", title),
        ("file-description", get_str(record, "descripcion")),
    ]

    data = compact({
        "resourceType": "DocumentReference",
        "id": get_str(record, "id", "fileId") or temporary_id("file"),
        "status": "current",
        "type": codeable_concept(text=file_type or DEFAULT_FILE_TYPE),
        "subject": build_reference("Patient", patient_id) if patient_id else None,
        "description": name or title,
        "content": [{"attachment": attachment}],
        "extension": build_extensions(values, base_url),
    })

    return create_model(DocumentReference, data)


def encode_document_stub(document_id: str) -> DocumentReference:
    """
    The backend has no lookup of a single file, reads return the bare reference.
    """
    return create_model(
        DocumentReference,
        {
            "resourceType": "DocumentReference",
            "id": document_id,
            "status": "current",
            "type": codeable_concept(text=DEFAULT_FILE_TYPE),
            "content": [{"attachment": {"title": DEFAULT_FILE_TYPE}}],
        },
    )
