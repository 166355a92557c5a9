"""
Encoding of loose backend values as FHIR extensions, and the way back.

Extensions are written as ``<base-url>/<short-key>``. Historical data carries different base urls,
so on read a short key matches any stored url that contains it.
"""
import logging
from typing import Any, Dict, Iterable, List, Sequence

from fhir.resources.R4B.extension import Extension

from app.models.fhir.types import EXTENSION_BASE_URL

logger = logging.getLogger(__name__)

# Value attributes checked when reading an extension, first hit wins
VALUE_FIELDS = (
    "valueString",
    "valueBoolean",
    "valueInteger",
    "valueDecimal",
    "valueCode",
    "valueDate",
    "valueDateTime",
    "valueUri",
)

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1


def extension_url(namespace_key: str, base_url: str = EXTENSION_BASE_URL) -> str:
    return f"{base_url.rstrip('/')}/{namespace_key}"


def short_key(url: str) -> str:
    return url.rstrip("/").rsplit("/", 1)[-1]


def to_extension(
    namespace_key: str, value: Any, base_url: str = EXTENSION_BASE_URL
) -> Extension | None:
    """
    Wraps a single value in an extension typed after the python value. Returns None for a None
    value so callers can skip absent fields.
    """
    if value is None:
        return None

    url = extension_url(namespace_key, base_url)
    if isinstance(value, bool):
        return Extension(url=url, valueBoolean=value)
    if isinstance(value, int) and INT32_MIN <= value <= INT32_MAX:
        return Extension(url=url, valueInteger=value)

    return Extension(url=url, valueString=str(value))


def build_extensions(
    values: Iterable[tuple[str, Any]], base_url: str = EXTENSION_BASE_URL
) -> List[Extension]:
    extensions = []
    for namespace_key, value in values:
        ext = to_extension(namespace_key, value, base_url)
        if ext is not None:
            extensions.append(ext)
    return extensions


def extension_value(extension: Extension) -> Any:
    for field in VALUE_FIELDS:
        value = getattr(extension, field, None)
        if value is not None:
            return value
    return None


def index_by_key(
    extensions: Sequence[Extension] | None, vocabulary: Iterable[str] | None = None
) -> Dict[str, Any]:
    """
    Returns a lookup of namespace key to value. Without a vocabulary the key is the last segment
    of the url. With a vocabulary every known short key is matched by containment in the url,
    the longest of overlapping keys winning. Duplicates resolve to the last occurrence.
    """
    index: Dict[str, Any] = {}
    if not extensions:
        return index

    known = list(vocabulary) if vocabulary is not None else None
    for extension in extensions:
        if extension.url is None:
            continue
        value = extension_value(extension)
        if known is None:
            index[short_key(extension.url)] = value
            continue
        matches = [key for key in known if key in extension.url]
        for key in matches:
            # "numero" must not capture ".../numero_afiliado" when that key is known too
            if any(key != other and key in other for other in matches):
                continue
            index[key] = value

    return index


def find_value(extensions: Sequence[Extension] | None, key: str) -> Any:
    """
    Value of the last extension whose url contains the key, None when there is none.
    """
    found = None
    for extension in extensions or []:
        if extension.url is not None and key in extension.url:
            found = extension_value(extension)
    return found


def find_str(extensions: Sequence[Extension] | None, key: str) -> str | None:
    value = find_value(extensions, key)
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
