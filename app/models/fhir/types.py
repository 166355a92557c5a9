from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field

HttpValidVerbs = Literal["GET", "POST", "PUT", "DELETE"]

EXTENSION_BASE_URL = "http://mi-servidor.com/fhir/StructureDefinition"
DNI_SYSTEM = "http://mi-servidor.com/fhir/dni"
LOINC_SYSTEM = "http://loinc.org"
ORGANIZATION_TYPE_SYSTEM = "http://terminology.hl7.org/CodeSystem/organization-type"
LOCATION_TYPE_SYSTEM = "http://terminology.hl7.org/CodeSystem/v3-RoleCode"
USER_TYPE_SYSTEM = "http://mi-servidor/fhir/CodeSystem/user-types"
USER_TYPE_VALUESET_URL = "http://mi-servidor/fhir/ValueSet/user-types"


class ResourceKind(Enum):
    PATIENT = "Patient"
    DIAGNOSTIC_REPORT = "DiagnosticReport"
    DOCUMENT_REFERENCE = "DocumentReference"
    PRACTITIONER = "Practitioner"
    ORGANIZATION = "Organization"
    LOCATION = "Location"


class OperationKind(Enum):
    READ = "read"
    SEARCH = "search-type"
    CREATE = "create"
    UPDATE = "update"
    GET_FILES = "$get-files"
    GET_HISTORIA = "$get-historia"
    CREATE_HISTORIA = "$create-historia"
    GET_USER_TYPES = "$get-user-types"

    @property
    def is_custom(self) -> bool:
        return self.value.startswith("$")


class ResourceReference(BaseModel):
    resource_type: str = Field(min_length=1)
    id: str = Field(min_length=1)

    def __str__(self) -> str:
        return f"{self.resource_type}/{self.id}"


class OperationResult(BaseModel):
    """
    Outcome of a create or update: the id assigned by the backend, when it returned one.
    """

    resource_type: str
    id: str | None = None
    created: bool = True

    @property
    def location(self) -> str | None:
        return f"{self.resource_type}/{self.id}" if self.id else None
