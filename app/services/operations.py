"""
Binds the resource services to the operation registry. Handlers only translate an
OperationRequest to a service call; parsing of request bodies happens here as well.
"""
from typing import Any, List

from fhir.resources.R4B.diagnosticreport import DiagnosticReport
from fhir.resources.R4B.documentreference import DocumentReference
from fhir.resources.R4B.patient import Patient
from fhir.resources.R4B.practitioner import Practitioner

from app.exceptions import ValidationError
from app.models.fhir.types import OperationKind, ResourceKind
from app.services.fhir.model_factory import parse_resource
from app.services.registry import OperationKey, OperationRegistry, OperationRequest
from app.services.resources.catalog_service import LocationService, OrganizationService
from app.services.resources.diagnostic_report_service import DiagnosticReportService
from app.services.resources.document_reference_service import DocumentReferenceService
from app.services.resources.patient_service import PatientService
from app.services.resources.practitioner_service import PractitionerService

R = ResourceKind
O = OperationKind

REQUIRED_OPERATIONS: List[OperationKey] = [
    *[(kind, op) for kind in ResourceKind for op in (O.READ, O.SEARCH)],
    (R.PATIENT, O.CREATE),
    (R.PATIENT, O.UPDATE),
    (R.PRACTITIONER, O.CREATE),
    (R.PRACTITIONER, O.UPDATE),
    (R.DIAGNOSTIC_REPORT, O.CREATE),
    (R.DOCUMENT_REFERENCE, O.CREATE),
    (R.DOCUMENT_REFERENCE, O.GET_FILES),
    (R.DIAGNOSTIC_REPORT, O.GET_HISTORIA),
    (R.DIAGNOSTIC_REPORT, O.CREATE_HISTORIA),
    (R.PRACTITIONER, O.GET_USER_TYPES),
]


def _body(kind: ResourceKind, request: OperationRequest) -> Any:
    return parse_resource(kind, request.require_body())


def _patient_param(request: OperationRequest) -> str:
    patient = request.param("patient", "subject")
    if not patient:
        raise ValidationError("The patient parameter is required")
    return patient.split("/")[-1]


def register_patient(registry: OperationRegistry, service: PatientService) -> None:
    def create(request: OperationRequest) -> Any:
        patient: Patient = _body(R.PATIENT, request)
        return service.create(patient, request.token)

    def update(request: OperationRequest) -> Any:
        patient: Patient = _body(R.PATIENT, request)
        return service.update(request.require_id(), patient, request.token)

    registry.register(R.PATIENT, O.READ, lambda r: service.read(r.require_id(), r.token))
    registry.register(R.PATIENT, O.SEARCH, lambda r: service.search(r.token))
    registry.register(R.PATIENT, O.CREATE, create)
    registry.register(R.PATIENT, O.UPDATE, update)


def register_diagnostic_report(
    registry: OperationRegistry, service: DiagnosticReportService
) -> None:
    def search(request: OperationRequest) -> Any:
        patient = request.param("patient", "subject")
        return service.search(
            request.token,
            patient=patient.split("/")[-1] if patient else None,
            annex_of=request.param("annex-of", "annex"),
            code=request.param("code"),
            history_id=request.param("_id"),
        )

    def create(request: OperationRequest) -> Any:
        report: DiagnosticReport = _body(R.DIAGNOSTIC_REPORT, request)
        return service.create(report, request.token)

    def create_history(request: OperationRequest) -> Any:
        report: DiagnosticReport = _body(R.DIAGNOSTIC_REPORT, request)
        patient = request.param("patient")
        return service.create_history(report, request.token, patient)

    registry.register(R.DIAGNOSTIC_REPORT, O.READ, lambda r: service.read(r.require_id(), r.token))
    registry.register(R.DIAGNOSTIC_REPORT, O.SEARCH, search)
    registry.register(R.DIAGNOSTIC_REPORT, O.CREATE, create)
    registry.register(
        R.DIAGNOSTIC_REPORT,
        O.GET_HISTORIA,
        lambda r: service.search_histories(_patient_param(r), r.token),
    )
    registry.register(R.DIAGNOSTIC_REPORT, O.CREATE_HISTORIA, create_history)


def register_document_reference(
    registry: OperationRegistry, service: DocumentReferenceService
) -> None:
    def search(request: OperationRequest) -> Any:
        return service.search(
            request.token, _patient_param(request), request.param("fileType", "type")
        )

    def create(request: OperationRequest) -> Any:
        document: DocumentReference = _body(R.DOCUMENT_REFERENCE, request)
        return service.create(document, request.token)

    registry.register(R.DOCUMENT_REFERENCE, O.READ, lambda r: service.read(r.require_id(), r.token))
    registry.register(R.DOCUMENT_REFERENCE, O.SEARCH, search)
    registry.register(R.DOCUMENT_REFERENCE, O.CREATE, create)
    registry.register(R.DOCUMENT_REFERENCE, O.GET_FILES, search)


def register_practitioner(registry: OperationRegistry, service: PractitionerService) -> None:
    def create(request: OperationRequest) -> Any:
        practitioner: Practitioner = _body(R.PRACTITIONER, request)
        return service.create(practitioner, request.token)

    def update(request: OperationRequest) -> Any:
        practitioner: Practitioner = _body(R.PRACTITIONER, request)
        return service.update(request.require_id(), practitioner, request.token)

    registry.register(R.PRACTITIONER, O.READ, lambda r: service.read(r.require_id(), r.token))
    registry.register(R.PRACTITIONER, O.SEARCH, lambda r: service.search(r.token))
    registry.register(R.PRACTITIONER, O.CREATE, create)
    registry.register(R.PRACTITIONER, O.UPDATE, update)
    registry.register(R.PRACTITIONER, O.GET_USER_TYPES, lambda r: service.user_types(r.token))


def register_catalogs(
    registry: OperationRegistry,
    organizations: OrganizationService,
    locations: LocationService,
) -> None:
    registry.register(
        R.ORGANIZATION, O.READ, lambda r: organizations.read(r.require_id(), r.token)
    )
    registry.register(
        R.ORGANIZATION, O.SEARCH, lambda r: organizations.search(r.token, r.param("_type", "type"))
    )
    registry.register(R.LOCATION, O.READ, lambda r: locations.read(r.require_id(), r.token))
    registry.register(
        R.LOCATION,
        O.SEARCH,
        lambda r: locations.search(
            r.token, r.param("_type", "type"), r.param("partof", "provincia")
        ),
    )


def create_operation_registry(
    patients: PatientService,
    reports: DiagnosticReportService,
    documents: DocumentReferenceService,
    practitioners: PractitionerService,
    organizations: OrganizationService,
    locations: LocationService,
) -> OperationRegistry:
    registry = OperationRegistry()
    register_patient(registry, patients)
    register_diagnostic_report(registry, reports)
    register_document_reference(registry, documents)
    register_practitioner(registry, practitioners)
    register_catalogs(registry, organizations, locations)
    registry.validate(REQUIRED_OPERATIONS)

    return registry
