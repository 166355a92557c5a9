from datetime import datetime, timezone
import logging
import random
import time
from typing import Any, Dict, List

from app.services.mapping.field_extractor import as_date

logger = logging.getLogger(__name__)


def temporary_id(prefix: str) -> str:
    """
    Id for a record the backend returned without identity. It changes on every call and must
    never be used to look the record up again.
    """
    temp_id = f"{prefix}-{int(time.time() * 1000)}-{random.randint(1000, 9999)}"
    logger.warning("Backend record without id, using temporary id %s", temp_id)
    return temp_id


def as_fhir_datetime(value: Any) -> str | None:
    """
    Renders a backend timestamp as a FHIR dateTime. Falls back to the date part when only a date
    can be recovered.
    """
    if isinstance(value, datetime):
        moment = value if value.tzinfo else value.replace(tzinfo=timezone.utc)
        return moment.isoformat()

    if isinstance(value, int) and not isinstance(value, bool):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc).isoformat()
        except (OverflowError, OSError, ValueError):
            logger.debug("Epoch value out of range: %s", value)
            return None

    if isinstance(value, str) and len(value.strip()) > 10:
        try:
            moment = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            moment = None
        if moment is not None:
            return as_fhir_datetime(moment)

    parsed = as_date(value)
    return parsed.isoformat() if parsed else None


def codeable_concept(
    text: str | None = None,
    system: str | None = None,
    code: str | None = None,
    display: str | None = None,
) -> Dict[str, Any]:
    concept: Dict[str, Any] = {}
    if code is not None:
        coding = {"system": system, "code": code, "display": display}
        concept["coding"] = [{k: v for k, v in coding.items() if v is not None}]
    if text is not None:
        concept["text"] = text
    return concept


def compact(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Drops None values and empty lists so optional elements are simply left out.
    """
    return {k: v for k, v in data.items() if v is not None and v != []}


def join_blocks(blocks: List[str]) -> str | None:
    text = "\n\n".join(b for b in blocks if b)
    return text or None
