import logging
from typing import Any, Dict

from fhir.resources.R4B.reference import Reference

from app.models.fhir.types import ResourceReference

logger = logging.getLogger(__name__)


def build_reference(resource_type: str, resource_id: str) -> Dict[str, Any]:
    return {"reference": str(ResourceReference(resource_type=resource_type, id=resource_id))}


def parse_reference(ref: str | None) -> ResourceReference:
    """
    Parses a relative "<Kind>/<id>" reference.
    """
    if ref is None:
        raise ValueError("Invalid reference (None)")

    if ref.startswith("https://") or ref.startswith("http://"):
        raise ValueError("Invalid absolute URL found")

    parts = ref.split("/")
    if len(parts) != 2 or not parts[0] or not parts[1]:
        logger.debug("Failed to parse reference: %s", ref)
        raise ValueError("Invalid reference: %s" % ref)

    return ResourceReference(resource_type=parts[0], id=parts[1])


def reference_id(data: Reference | None, *resource_types: str) -> str | None:
    """
    Returns the id of a reference when it parses and points to one of the given kinds,
    None otherwise.
    """
    if data is None or data.reference is None:
        return None

    try:
        ref = parse_reference(data.reference)
    except ValueError:
        return None

    if resource_types and ref.resource_type not in resource_types:
        return None

    return ref.id
