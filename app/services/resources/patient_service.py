import logging
from typing import List

from fhir.resources.R4B.patient import Patient

from app.exceptions import NotFoundError
from app.models.fhir.types import OperationResult
from app.services.fhir.decoders.patient import decode_patient
from app.services.fhir.encoders.patient import encode_patient
from app.services.mapping.field_extractor import get_str
from app.services.resources.base import ResourceService, as_records, first_record

logger = logging.getLogger(__name__)


class PatientService(ResourceService):
    def read(self, patient_id: str, token: str | None) -> Patient:
        record = first_record(self.api.get(f"patient/{patient_id}", token))
        if record is None:
            raise NotFoundError(f"Patient {patient_id} not found")

        return encode_patient(record, self.extension_base_url)

    def search(self, token: str | None) -> List[Patient]:
        records = as_records(self.api.get("patient", token))
        return self.encode_all(records, lambda r: encode_patient(r, self.extension_base_url))

    def create(self, patient: Patient, token: str | None) -> OperationResult:
        body = self.api.post("patient", token, decode_patient(patient))
        record = first_record(body) or {}
        patient_id = get_str(record, "hash_id", "id")
        logger.info("Created patient %s", patient_id)

        return OperationResult(resource_type="Patient", id=patient_id)

    def update(self, patient_id: str, patient: Patient, token: str | None) -> OperationResult:
        self.api.put(f"patient/{patient_id}", token, decode_patient(patient))
        return OperationResult(resource_type="Patient", id=patient_id, created=False)
