import json
import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, File, Form, Response, UploadFile

from app.container import get_document_reference_service
from app.exceptions import ValidationError
from app.models.fhir.types import ResourceKind
from app.routers.errors import FHIR_JSON
from app.routers.security import require_bearer_token
from app.services.fhir.model_factory import parse_resource
from app.services.resources.document_reference_service import DocumentReferenceService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/file", tags=["Files"])


def fill_upload_metadata(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    The metadata describes a file that does not exist yet, so status and content are filled in
    to pass DocumentReference validation.
    """
    if "status" not in data:
        data["status"] = "current"

    if "content" not in data:
        data["content"] = [{"attachment": {"title": data.get("description") or "upload"}}]

    return data


def parse_metadata(metadata: str) -> Dict[str, Any]:
    try:
        data = json.loads(metadata)
    except json.JSONDecodeError as e:
        raise ValidationError(f"metadata is not valid JSON: {e.msg}")

    if not isinstance(data, dict):
        raise ValidationError("metadata must be a DocumentReference object")

    return fill_upload_metadata(data)


@router.post("/upload", summary="Upload files for a patient", status_code=201)
def upload_files(
    files: List[UploadFile] = File(...),
    metadata: str = Form(...),
    token: str = Depends(require_bearer_token),
    service: DocumentReferenceService = Depends(get_document_reference_service),
) -> Response:
    document = parse_resource(ResourceKind.DOCUMENT_REFERENCE, parse_metadata(metadata))

    forwarded = [
        (f.filename or "file", f.file.read(), f.content_type or "application/octet-stream")
        for f in files
    ]
    logger.info(f"Forwarding {len(forwarded)} file(s) to the backend")

    stored = service.upload(forwarded, document, token)  # type: ignore[arg-type]
    return Response(content=stored.model_dump_json(), media_type=FHIR_JSON, status_code=201)
