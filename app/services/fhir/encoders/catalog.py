"""
Organizations and locations come from the backend's plain catalog tables (health insurances,
programs, provinces and cities). They carry no extensions, only a typed code.
"""
from fhir.resources.R4B.location import Location
from fhir.resources.R4B.organization import Organization

from app.models.backend.types import BackendRecord
from app.models.fhir.types import LOCATION_TYPE_SYSTEM, ORGANIZATION_TYPE_SYSTEM
from app.services.fhir.encoders.common import codeable_concept, compact, temporary_id
from app.services.fhir.model_factory import create_model
from app.services.fhir.references.reference_misc import build_reference
from app.services.mapping.field_extractor import get_str


def _organization(record: BackendRecord, id_key: str, code: str, display: str) -> Organization:
    data = compact({
        "resourceType": "Organization",
        "id": get_str(record, id_key) or temporary_id("org"),
        "active": True,
        "name": get_str(record, "nombre"),
        "type": [codeable_concept(system=ORGANIZATION_TYPE_SYSTEM, code=code, display=display)],
    })
    return create_model(Organization, data)


def encode_insurance(record: BackendRecord) -> Organization:
    return _organization(record, "id_mutual", "INS", "Insurance Company")


def encode_program(record: BackendRecord) -> Organization:
    return _organization(record, "id_prestacion", "PROG", "Program")


def encode_province(record: BackendRecord) -> Location:
    data = compact({
        "resourceType": "Location",
        "id": get_str(record, "id_provincia") or temporary_id("prov"),
        "status": "active",
        "name": get_str(record, "nombre"),
        "type": [codeable_concept(system=LOCATION_TYPE_SYSTEM, code="PROV", display="Provincia")],
    })
    return create_model(Location, data)


def encode_city(record: BackendRecord) -> Location:
    province_id = get_str(record, "id_provincia")
    data = compact({
        "resourceType": "Location",
        "id": get_str(record, "id_ciudad") or temporary_id("city"),
        "status": "active",
        "name": get_str(record, "nombre"),
        "type": [codeable_concept(system=LOCATION_TYPE_SYSTEM, code="CITY", display="Ciudad")],
        "partOf": build_reference("Location", province_id) if province_id else None,
    })
    return create_model(Location, data)
