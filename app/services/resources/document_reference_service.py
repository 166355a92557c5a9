import logging
import time
from typing import Any, Dict, List, Tuple

from fhir.resources.R4B.documentreference import DocumentReference

from app.exceptions import InternalError, ValidationError
from app.models.fhir.types import OperationResult
from app.services.fhir.decoders.document_reference import decode_upload_metadata
from app.services.fhir.encoders.document_reference import (
    encode_document_reference,
    encode_document_stub,
)
from app.services.mapping.field_extractor import get
from app.services.resources.base import ResourceService, as_records, first_record

logger = logging.getLogger(__name__)

ALLOWED_CONTENT_TYPES = ("image/jpeg", "image/png", "application/pdf", "video/mp4")

# (filename, content, content type)
UploadFile = Tuple[str, bytes, str]


class DocumentReferenceService(ResourceService):
    def read(self, document_id: str, token: str | None) -> DocumentReference:
        return encode_document_stub(document_id)

    def search(
        self, token: str | None, patient: str | None = None, file_type: str | None = None
    ) -> List[DocumentReference]:
        if not patient:
            raise ValidationError("Search DocumentReference by patient")

        records = as_records(
            self.api.get("file", token, params={"hash_id": patient, "fileType": file_type})
        )
        return self.encode_all(
            records, lambda r: encode_document_reference(r, patient, self.extension_base_url)
        )

    def create(self, document: DocumentReference, token: str | None) -> OperationResult:
        """
        Files are only stored through the upload endpoint, a plain create is acknowledged with
        a generated id.
        """
        document_id = f"doc-{int(time.time() * 1000)}"
        logger.info("DocumentReference create without file, acknowledged as %s", document_id)
        return OperationResult(resource_type="DocumentReference", id=document_id)

    def upload(
        self, files: List[UploadFile], document: DocumentReference, token: str | None
    ) -> DocumentReference:
        if not files:
            raise ValidationError("At least one file is required")

        for filename, _, content_type in files:
            if content_type not in ALLOWED_CONTENT_TYPES:
                raise ValidationError(
                    f"File {filename} has unsupported type {content_type}, allowed: {', '.join(ALLOWED_CONTENT_TYPES)}"
                )

        metadata = decode_upload_metadata(document)
        multipart = [("files", file) for file in files]
        body = self.api.upload(
            "file/upload",
            token,
            files=multipart,
            data=metadata,
            params={"hash_id": metadata["hash_id"]},
        )

        uploaded = as_records(get(first_record(body), "uploadedFiles"))
        if not uploaded:
            raise InternalError("The backend did not report the uploaded file")

        stored: Dict[str, Any] = uploaded[0]
        record = {
            "id": get(stored, "fileId", "id"),
            "url": get(stored, "fileUrl", "url"),
            "name": get(stored, "fileName", "name"),
            "type": get(stored, "fileType", "type"),
            "titulo": metadata.get("titulo"),
            "descripcion": metadata.get("descripcion"),
        }
        return encode_document_reference(record, metadata["hash_id"], self.extension_base_url)
