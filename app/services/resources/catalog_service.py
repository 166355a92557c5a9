from typing import List

from fhir.resources.R4B.location import Location
from fhir.resources.R4B.organization import Organization

from app.exceptions import NotFoundError, ValidationError
from app.services.fhir.encoders.catalog import (
    encode_city,
    encode_insurance,
    encode_program,
    encode_province,
)
from app.services.mapping.field_extractor import get_str
from app.services.resources.base import ResourceService, as_records

INSURANCE = "insurance"
PROGRAM = "program"
PROVINCE = "province"
CITY = "city"


class OrganizationService(ResourceService):
    def insurances(self, token: str | None) -> List[Organization]:
        return self.encode_all(as_records(self.api.get("abm/mutuales", token)), encode_insurance)

    def programs(self, token: str | None) -> List[Organization]:
        return self.encode_all(as_records(self.api.get("abm/prestaciones", token)), encode_program)

    def search(self, token: str | None, org_type: str | None = None) -> List[Organization]:
        match org_type:
            case None:
                return self.insurances(token) + self.programs(token)
            case "insurance":
                return self.insurances(token)
            case "program":
                return self.programs(token)
            case _:
                raise ValidationError(f"Unknown organization _type {org_type}, use insurance or program")

    def read(self, organization_id: str, token: str | None) -> Organization:
        # Insurance ids take precedence when both catalogs share an id
        for record in as_records(self.api.get("abm/mutuales", token)):
            if get_str(record, "id_mutual") == organization_id:
                return encode_insurance(record)
        for record in as_records(self.api.get("abm/prestaciones", token)):
            if get_str(record, "id_prestacion") == organization_id:
                return encode_program(record)

        raise NotFoundError(f"Organization {organization_id} not found")


class LocationService(ResourceService):
    def provinces(self, token: str | None) -> List[Location]:
        return self.encode_all(as_records(self.api.get("abm/provincias", token)), encode_province)

    def cities(self, token: str | None, province_id: str | None = None) -> List[Location]:
        path = f"abm/ciudades/{province_id}" if province_id else "abm/ciudades"
        return self.encode_all(as_records(self.api.get(path, token)), encode_city)

    def search(
        self, token: str | None, location_type: str | None = None, part_of: str | None = None
    ) -> List[Location]:
        if part_of:
            return self.cities(token, part_of.split("/")[-1])

        match location_type:
            case None:
                return self.provinces(token) + self.cities(token)
            case "province":
                return self.provinces(token)
            case "city":
                return self.cities(token)
            case _:
                raise ValidationError(f"Unknown location _type {location_type}, use province or city")

    def read(self, location_id: str, token: str | None) -> Location:
        for record in as_records(self.api.get("abm/provincias", token)):
            if get_str(record, "id_provincia") == location_id:
                return encode_province(record)
        for record in as_records(self.api.get("abm/ciudades", token)):
            if get_str(record, "id_ciudad") == location_id:
                return encode_city(record)

        raise NotFoundError(f"Location {location_id} not found")
