from typing import Any

import pytest
from fhir.resources.R4B.reference import Reference

from app.services.fhir.references.reference_misc import (
    build_reference,
    parse_reference,
    reference_id,
)


def test_build_reference() -> None:
    assert build_reference("Patient", "p1") == {"reference": "Patient/p1"}


def test_parse_reference() -> None:
    ref = parse_reference("DiagnosticReport/123")

    assert ref.resource_type == "DiagnosticReport"
    assert ref.id == "123"


def test_parse_reference_invalid_none() -> None:
    with pytest.raises(ValueError, match="Invalid reference"):
        parse_reference(None)


def test_parse_reference_rejects_absolute_url() -> None:
    with pytest.raises(ValueError, match="Invalid absolute URL"):
        parse_reference("https://example.com/fhir/Patient/123")


def test_parse_reference_invalid_format(caplog: Any) -> None:
    caplog.set_level("DEBUG")

    with pytest.raises(ValueError, match="Invalid reference:"):
        parse_reference("InvalidReferenceString")

    assert "Failed to parse reference" in caplog.text


def test_reference_id_filters_on_kind() -> None:
    ref = Reference.model_construct(reference="DiagnosticNote/123")

    assert reference_id(ref) == "123"
    assert reference_id(ref, "DiagnosticReport", "DiagnosticNote") == "123"
    assert reference_id(ref, "Patient") is None
    assert reference_id(None, "Patient") is None
    assert reference_id(Reference.model_construct(reference="Patient/"), "Patient") is None
