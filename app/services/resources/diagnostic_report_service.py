import logging
from typing import List

from fhir.resources.R4B.diagnosticreport import DiagnosticReport

from app.exceptions import NotFoundError, ValidationError
from app.models.fhir.types import OperationResult
from app.services.fhir.decoders.fisiatric_history import decode_fisiatric_history
from app.services.fhir.decoders.report import decode_annex, decode_report, is_annex
from app.services.fhir.encoders.fisiatric_history import (
    HISTORY_LOINC_CODE,
    encode_fisiatric_history,
)
from app.services.fhir.encoders.report import encode_annex, encode_report
from app.services.mapping.field_extractor import get_str
from app.services.resources.base import ResourceService, as_records, first_record

logger = logging.getLogger(__name__)


class DiagnosticReportService(ResourceService):
    """
    DiagnosticReport covers three backend concepts: reports, annexes (comments on a report) and
    the fisiatric clinical history of a patient.
    """

    def read(self, report_id: str, token: str | None) -> DiagnosticReport:
        record = first_record(self.api.get(f"report/{report_id}", token))
        if record is None:
            raise NotFoundError(f"DiagnosticReport {report_id} not found")

        return encode_report(record, base_url=self.extension_base_url)

    def search(
        self,
        token: str | None,
        patient: str | None = None,
        annex_of: str | None = None,
        code: str | None = None,
        history_id: str | None = None,
    ) -> List[DiagnosticReport]:
        if annex_of:
            return self.search_annexes(annex_of, token)

        if code == HISTORY_LOINC_CODE:
            if history_id:
                return [self.read_history(history_id, token)]
            if patient:
                return self.search_histories(patient, token)

        if patient:
            return self.search_reports(patient, token)

        raise ValidationError("Search DiagnosticReport by patient or annex-of")

    def search_reports(self, patient_id: str, token: str | None) -> List[DiagnosticReport]:
        records = as_records(self.api.get(f"report/all/{patient_id}", token))
        return self.encode_all(
            records, lambda r: encode_report(r, patient_id, self.extension_base_url)
        )

    def search_annexes(self, report_id: str, token: str | None) -> List[DiagnosticReport]:
        records = as_records(self.api.get(f"report/{report_id}/annexes", token))
        return self.encode_all(
            records, lambda r: encode_annex(r, report_id, self.extension_base_url)
        )

    def search_histories(self, patient_id: str, token: str | None) -> List[DiagnosticReport]:
        records = as_records(self.api.get(f"ehr/hc-fisiatric/{patient_id}", token))
        return self.encode_all(
            records, lambda r: encode_fisiatric_history(r, patient_id, self.extension_base_url)
        )

    def read_history(self, history_id: str, token: str | None) -> DiagnosticReport:
        record = first_record(self.api.post("ehr/hc-fisiatric", token, {"ehrHashId": history_id}))
        if record is None:
            raise NotFoundError(f"Fisiatric history {history_id} not found")

        return encode_fisiatric_history(record, base_url=self.extension_base_url)

    def create(self, report: DiagnosticReport, token: str | None) -> OperationResult:
        if is_annex(report):
            payload = decode_annex(report)
            parent_id = payload["reportHashId"]
            body = first_record(self.api.post(f"report/{parent_id}/createAnnex", token, payload)) or {}
            annex_id = get_str(body, "id_anexo", "id")
            logger.info("Created annex %s for report %s", annex_id, parent_id)
            return OperationResult(resource_type="DiagnosticReport", id=annex_id)

        body = first_record(self.api.post("report/create", token, decode_report(report))) or {}
        report_id = get_str(body, "id_informe", "id")
        logger.info("Created report %s", report_id)
        return OperationResult(resource_type="DiagnosticReport", id=report_id)

    def create_history(
        self, report: DiagnosticReport, token: str | None, patient_id: str | None = None
    ) -> OperationResult:
        payload = decode_fisiatric_history(report, patient_id)
        body = first_record(self.api.post("ehr/hc-fisiatric", token, payload)) or {}
        history_id = get_str(body, "id_hc_fisiatrica", "hash_id", "id")
        logger.info("Created fisiatric history %s for patient %s", history_id, payload["hash_id"])
        return OperationResult(resource_type="DiagnosticReport", id=history_id)
