import logging
from typing import Any, Dict

from fhir.resources.R4B.diagnosticreport import DiagnosticReport

from app.exceptions import ValidationError
from app.models.backend.types import BackendRecord
from app.services.fhir.decoders.common import drop_none
from app.services.fhir.encoders.report import DEFAULT_REPORT_TITLE
from app.services.fhir.references.reference_misc import reference_id
from app.services.mapping.extension_codec import find_value, index_by_key
from app.services.mapping.field_extractor import as_bool, as_str, is_blank

logger = logging.getLogger(__name__)

# Kinds a parent reference may point to. DiagnosticNote is accepted for older clients.
NOTE_KINDS = ("DiagnosticReport", "DiagnosticNote")

REPORT_WRITE_KEYS = [
    "patient-dni",
    "user-id",
    "report-type",
    "report-type-id",
    "report-type-name",
    "speciality-id",
    "ehr-id",
]


def _present(value: Any) -> str | None:
    text = as_str(value)
    if is_blank(text) or text == "undefined":
        return None
    return text.strip()  # type: ignore[union-attr]


def is_annex(report: DiagnosticReport) -> bool:
    return as_bool(find_value(report.extension, "is-annex"))


def resolve_annex_parent(report: DiagnosticReport) -> str:
    """
    Parent report of an annex: the subject reference first, then the report-hash-id extension.
    An annex without a parent cannot be written.
    """
    parent = _present(reference_id(report.subject, *NOTE_KINDS))
    if parent is None:
        parent = _present(find_value(report.extension, "report-hash-id"))

    if parent is None:
        logger.warning("Annex without a resolvable parent report")
        raise ValidationError(
            "An annex needs a parent report, set subject to DiagnosticReport/<id> or the report-hash-id extension"
        )

    return parent


def decode_annex(report: DiagnosticReport) -> BackendRecord:
    return {
        "reportHashId": resolve_annex_parent(report),
        "userId": as_str(find_value(report.extension, "user-id")),
        "text": report.conclusion or "",
    }


def decode_report(report: DiagnosticReport) -> BackendRecord:
    index = index_by_key(report.extension, REPORT_WRITE_KEYS)
    title = report.code.text if report.code is not None else None

    payload: Dict[str, Any] = {
        "patientDni": as_str(index.get("patient-dni")),
        "userId": as_str(index.get("user-id")),
        # backend field name
        "tittle": title or DEFAULT_REPORT_TITLE,
        "text": report.conclusion or "",
        "reportType": as_str(index.get("report-type")) or "1",
        "specialityId": as_str(index.get("speciality-id")),
        "ehrId": as_str(index.get("ehr-id")),
    }
    return drop_none(payload)
