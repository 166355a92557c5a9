"""
Flattening of nested backend groups into extensions and the reverse. Both directions are driven
only by the GroupSchema, so a new section is a new row in a schema table.
"""
import logging
from typing import Any, Dict, List, Mapping

from fhir.resources.R4B.extension import Extension

from app.models.fhir.types import EXTENSION_BASE_URL
from app.services.mapping.extension_codec import to_extension
from app.services.mapping.field_extractor import as_str, is_blank
from app.services.mapping.group_schema import GroupSchema

logger = logging.getLogger(__name__)


def resolve_path(data: Mapping[str, Any] | None, path: tuple[str, ...]) -> Any:
    current: Any = data
    for part in path:
        if not isinstance(current, Mapping):
            return None
        current = current.get(part)
        if current is None:
            return None
    return current


def flatten(
    data: Mapping[str, Any] | None,
    schema: GroupSchema,
    base_url: str = EXTENSION_BASE_URL,
) -> List[Extension]:
    extensions = []
    for field in schema.entries:
        value = resolve_path(data, field.path)
        if is_blank(value):
            continue
        if isinstance(value, (dict, list)):
            logger.debug(
                "Skipping non scalar value at %s in %s", ".".join(field.path), schema.name
            )
            continue

        ext = to_extension(field.namespace_key, value, base_url)
        if ext is not None:
            extensions.append(ext)

    return extensions


def unflatten(index: Mapping[str, Any], schema: GroupSchema) -> Dict[str, Any]:
    """
    Rebuilds the nested object from a namespace key lookup. Every declared field is present in
    the result, missing values become an empty string.
    """
    result: Dict[str, Any] = {}
    for field in schema.entries:
        node = result
        for part in field.path[:-1]:
            node = node.setdefault(part, {})
        value = index.get(field.namespace_key)
        node[field.path[-1]] = "" if value is None else value

    return result


def render_sections(data: Mapping[str, Any] | None, schema: GroupSchema) -> List[str]:
    """
    Human readable blocks, one per section that has at least one non-empty value.
    """
    blocks = []
    for section in schema.sections:
        lines = []
        for field in section.rows:
            value = resolve_path(data, field.path)
            if is_blank(value) or isinstance(value, (dict, list)):
                continue
            lines.append(f"- {field.display_label}: {as_str(value)}")
        if lines:
            blocks.append("\n".join([f"{section.title}:", *lines]))

    return blocks
