import inject

from app.config import get_config
from app.services.api.backend_api import BackendApi
from app.services.auth.factory import TokenValidatorFactory
from app.services.auth.token_validator import TokenValidator
from app.services.operations import create_operation_registry
from app.services.registry import OperationRegistry
from app.services.resources.catalog_service import LocationService, OrganizationService
from app.services.resources.diagnostic_report_service import DiagnosticReportService
from app.services.resources.document_reference_service import DocumentReferenceService
from app.services.resources.patient_service import PatientService
from app.services.resources.practitioner_service import PractitionerService
from app.services.wake_up import BackendWakeUp
from app.stats import get_stats


def container_config(binder: inject.Binder) -> None:
    config = get_config()

    api = BackendApi(
        base_url=config.backend.api_url,
        timeout=config.backend.timeout,
        stats=get_stats(),
    )
    binder.bind(BackendApi, api)

    base_url = config.fhir.extension_base_url
    documents = DocumentReferenceService(api, base_url)
    binder.bind(DocumentReferenceService, documents)

    registry = create_operation_registry(
        patients=PatientService(api, base_url),
        reports=DiagnosticReportService(api, base_url),
        documents=documents,
        practitioners=PractitionerService(api, base_url),
        organizations=OrganizationService(api, base_url),
        locations=LocationService(api, base_url),
    )
    binder.bind(OperationRegistry, registry)

    binder.bind(TokenValidator, TokenValidatorFactory(config.auth).create())

    binder.bind(
        BackendWakeUp,
        BackendWakeUp(
            health_url=f"{config.backend.url}/health",
            timeout=config.backend.wake_up_timeout,
        ),
    )


def get_operation_registry() -> OperationRegistry:
    return inject.instance(OperationRegistry)


def get_token_validator() -> TokenValidator:
    return inject.instance(TokenValidator)  # type: ignore[type-abstract]


def get_document_reference_service() -> DocumentReferenceService:
    return inject.instance(DocumentReferenceService)


def get_backend_wake_up() -> BackendWakeUp:
    return inject.instance(BackendWakeUp)


def setup_container() -> None:
    inject.configure(container_config, once=True)
