from unittest.mock import MagicMock

from fhir.resources.R4B.patient import Patient

from app.models.fhir.types import OperationKind, ResourceKind
from app.services.fhir.bundle import create_searchset
from app.services.fhir.capability_statement import FHIR_VERSION, create_capability_statement
from app.services.operations import create_operation_registry
from app.services.registry import OperationRegistry


def test_create_searchset() -> None:
    bundle = create_searchset([Patient(id="p1"), Patient(id="p2")])

    assert bundle.type == "searchset"
    assert bundle.total == 2
    assert [e.fullUrl for e in bundle.entry] == ["Patient/p1", "Patient/p2"]
    assert bundle.entry[0].resource.id == "p1"


def test_create_searchset_empty() -> None:
    bundle = create_searchset([])

    assert bundle.total == 0
    assert bundle.entry is None


def test_capability_statement_lists_registered_operations() -> None:
    registry = create_operation_registry(
        patients=MagicMock(),
        reports=MagicMock(),
        documents=MagicMock(),
        practitioners=MagicMock(),
        organizations=MagicMock(),
        locations=MagicMock(),
    )

    statement = create_capability_statement(registry)
    resources = {r.type: r for r in statement.rest[0].resource}

    assert statement.fhirVersion == FHIR_VERSION
    assert set(resources) == {k.value for k in ResourceKind}
    assert [i.code for i in resources["Patient"].interaction] == [
        "read",
        "search-type",
        "create",
        "update",
    ]
    assert resources["Patient"].operation is None
    assert [o.name for o in resources["DiagnosticReport"].operation] == [
        "get-historia",
        "create-historia",
    ]
    assert [o.name for o in resources["Practitioner"].operation] == ["get-user-types"]


def test_capability_statement_of_partial_registry() -> None:
    registry = OperationRegistry()
    registry.register(ResourceKind.LOCATION, OperationKind.READ, lambda r: None)

    statement = create_capability_statement(registry)

    assert [r.type for r in statement.rest[0].resource] == ["Location"]
