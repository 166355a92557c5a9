import logging
from typing import Any, Dict, TypeVar, Type

from fhir.resources.R4B.diagnosticreport import DiagnosticReport
from fhir.resources.R4B.documentreference import DocumentReference
from fhir.resources.R4B.domainresource import DomainResource
from fhir.resources.R4B.location import Location
from fhir.resources.R4B.organization import Organization
from fhir.resources.R4B.patient import Patient
from fhir.resources.R4B.practitioner import Practitioner
from pydantic import ValidationError as PydanticValidationError

from app.exceptions import MappingError, ValidationError
from app.models.fhir.types import ResourceKind

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=DomainResource)

MODELS: Dict[ResourceKind, Type[DomainResource]] = {
    ResourceKind.PATIENT: Patient,
    ResourceKind.DIAGNOSTIC_REPORT: DiagnosticReport,
    ResourceKind.DOCUMENT_REFERENCE: DocumentReference,
    ResourceKind.PRACTITIONER: Practitioner,
    ResourceKind.ORGANIZATION: Organization,
    ResourceKind.LOCATION: Location,
}


def create_model(model: Type[T], data: Dict[str, Any]) -> T:
    """
    Validates encoder output into a FHIR model. Backend data that cannot form a valid resource
    is a mapping failure, not a client error.
    """
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        logger.warning("Could not build %s from backend data: %s", model.__name__, e)
        raise MappingError(f"Could not build {model.__name__}: {e.error_count()} invalid fields")


def parse_resource(kind: ResourceKind, data: Dict[str, Any]) -> DomainResource:
    """
    Parses an inbound request body. Anything that is not a valid resource of the expected kind
    is a client error.
    """
    resource_type = data.get("resourceType")
    if resource_type is not None and resource_type != kind.value:
        raise ValidationError(
            f"Expected a {kind.value} resource, got {resource_type}"
        )

    model = MODELS[kind]
    try:
        return model.model_validate({**data, "resourceType": kind.value})
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid {kind.value} resource: {e.errors()[0]['msg']}") from e
