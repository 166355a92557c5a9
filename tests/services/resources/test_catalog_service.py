from unittest.mock import MagicMock

import pytest

from app.exceptions import NotFoundError, ValidationError
from app.services.resources.catalog_service import LocationService, OrganizationService
from tests.test_config import TEST_EXTENSION_BASE_URL
from tests.utils import MOCK_TOKEN

INSURANCES = [{"id_mutual": 1, "nombre": "OSDE"}]
PROGRAMS = [{"id_prestacion": 1, "nombre": "Rehabilitacion"}, {"id_prestacion": 2, "nombre": "Estimulacion"}]


def catalog(responses: dict) -> MagicMock:
    api = MagicMock()
    api.get.side_effect = lambda path, token: responses[path]
    return api


def test_organization_search_by_type() -> None:
    api = catalog({"abm/mutuales": INSURANCES, "abm/prestaciones": PROGRAMS})
    service = OrganizationService(api, TEST_EXTENSION_BASE_URL)

    assert [o.type[0].coding[0].code for o in service.search(MOCK_TOKEN)] == ["INS", "PROG", "PROG"]
    assert [o.id for o in service.search(MOCK_TOKEN, "program")] == ["1", "2"]
    assert [o.name for o in service.search(MOCK_TOKEN, "insurance")] == ["OSDE"]

    with pytest.raises(ValidationError, match="Unknown organization _type"):
        service.search(MOCK_TOKEN, "hospital")


def test_organization_read_prefers_insurance() -> None:
    service = OrganizationService(
        catalog({"abm/mutuales": INSURANCES, "abm/prestaciones": PROGRAMS}), TEST_EXTENSION_BASE_URL
    )

    assert service.read("1", MOCK_TOKEN).type[0].coding[0].code == "INS"
    assert service.read("2", MOCK_TOKEN).name == "Estimulacion"
    with pytest.raises(NotFoundError):
        service.read("3", MOCK_TOKEN)


def test_location_search() -> None:
    api = catalog(
        {
            "abm/provincias": [{"id_provincia": 2, "nombre": "Santa Fe"}],
            "abm/ciudades": [{"id_ciudad": 5, "nombre": "Rosario", "id_provincia": 2}],
            "abm/ciudades/2": [{"id_ciudad": 5, "nombre": "Rosario", "id_provincia": 2}],
        }
    )
    service = LocationService(api, TEST_EXTENSION_BASE_URL)

    assert [loc.name for loc in service.search(MOCK_TOKEN)] == ["Santa Fe", "Rosario"]
    assert [loc.id for loc in service.search(MOCK_TOKEN, "province")] == ["2"]

    cities = service.search(MOCK_TOKEN, part_of="Location/2")
    assert cities[0].partOf.reference == "Location/2"
    api.get.assert_called_with("abm/ciudades/2", MOCK_TOKEN)

    with pytest.raises(ValidationError):
        service.search(MOCK_TOKEN, "country")


def test_location_read() -> None:
    service = LocationService(
        catalog(
            {
                "abm/provincias": [{"id_provincia": 2, "nombre": "Santa Fe"}],
                "abm/ciudades": [{"id_ciudad": 5, "nombre": "Rosario", "id_provincia": 2}],
            }
        ),
        TEST_EXTENSION_BASE_URL,
    )

    assert service.read("5", MOCK_TOKEN).name == "Rosario"
    with pytest.raises(NotFoundError):
        service.read("9", MOCK_TOKEN)
