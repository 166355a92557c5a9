"""
Tolerant access to backend records.

The backend has renamed columns over time and its date columns come back in different shapes
depending on the driver, so every read goes through these helpers. None means "absent": the
helpers never raise on unexpected input, callers decide whether an absent value is fatal.
"""
from datetime import date, datetime, timezone
import json
import logging
from typing import Any, Dict

from app.exceptions import MappingError
from app.models.backend.types import BackendRecord

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"


def get(record: BackendRecord | None, primary_key: str, *fallback_keys: str) -> Any:
    """
    Returns the first present, non-null value for the primary key or one of the fallback keys,
    tried in order.
    """
    if not record:
        return None

    for key in (primary_key, *fallback_keys):
        value = record.get(key)
        if value is not None:
            return value

    return None


def get_str(record: BackendRecord | None, primary_key: str, *fallback_keys: str) -> str | None:
    return as_str(get(record, primary_key, *fallback_keys))


def as_str(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def as_date(value: Any) -> date | None:
    """
    Coerces a backend date to a date. Accepted shapes, in order: datetime (date part, UTC when
    aware), date, epoch milliseconds (UTC) and a string starting with yyyy-MM-dd.
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return value.astimezone(timezone.utc).date()
        return value.date()

    if isinstance(value, date):
        return value

    # bool is an int subclass but never a timestamp
    if isinstance(value, int) and not isinstance(value, bool):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc).date()
        except (OverflowError, OSError, ValueError):
            logger.debug("Epoch value out of range: %s", value)
            return None

    if isinstance(value, str):
        try:
            return datetime.strptime(value.strip()[:10], DATE_FORMAT).date()
        except ValueError:
            logger.debug("Could not parse date: %s", value)
            return None

    logger.debug("Unsupported date type %s", type(value).__name__)
    return None


def as_bool(value: Any) -> bool:
    """
    Non-zero numbers and the string "true" (any case) are true, everything else is false.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return False


def is_active(record: BackendRecord, inactive_key: str = "inactivo") -> bool:
    if record.get(inactive_key) is None:
        return True
    return not as_bool(record[inactive_key])


def normalize_phone(value: Any) -> str | None:
    phone = as_str(value)
    if phone is None:
        return None
    return phone.replace("-", "").strip() or None


def as_phone(value: Any) -> int | str | None:
    """
    Strips hyphens from a phone number and returns it as an int when it is only digits,
    otherwise as the stripped string.
    """
    phone = normalize_phone(value)
    if phone is None:
        return None
    try:
        return int(phone)
    except ValueError:
        logger.debug("Phone number is not numeric, keeping it as text: %s", phone)
        return phone


def parse_json_object(value: Any) -> Dict[str, Any]:
    """
    Nested backend sections arrive either as objects or as JSON encoded strings.
    """
    if isinstance(value, dict):
        return value

    if isinstance(value, str):
        try:
            parsed = json.loads(value)
        except json.JSONDecodeError as e:
            raise MappingError(f"Invalid JSON object: {e}") from e
        if isinstance(parsed, dict):
            return parsed

    raise MappingError(f"Expected a JSON object, got {type(value).__name__}")


def is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def to_camel(key: str) -> str:
    head, *tail = key.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in tail)


def camelize_keys(value: Any) -> Any:
    """
    Stored records use snake_case keys inside nested sections where the write payload uses
    camelCase. Keys without underscores are kept as they are.
    """
    if isinstance(value, dict):
        return {to_camel(str(k)): camelize_keys(v) for k, v in value.items()}
    if isinstance(value, list):
        return [camelize_keys(v) for v in value]
    return value
