import logging
from typing import Callable, List, TypeVar

from app.exceptions import MappingError
from app.models.backend.types import BackendRecord, JsonValue
from app.services.api.backend_api import BackendApi

logger = logging.getLogger(__name__)

T = TypeVar("T")


def as_records(body: JsonValue) -> List[BackendRecord]:
    """
    List endpoints return a bare array, single lookups an object. Anything that is not an object
    is skipped.
    """
    if body is None:
        return []
    items = body if isinstance(body, list) else [body]
    return [item for item in items if isinstance(item, dict)]


def first_record(body: JsonValue) -> BackendRecord | None:
    records = as_records(body)
    return records[0] if records else None


class ResourceService:
    def __init__(self, api: BackendApi, extension_base_url: str) -> None:
        self.api = api
        self.extension_base_url = extension_base_url

    @staticmethod
    def encode_all(records: List[BackendRecord], encoder: Callable[[BackendRecord], T]) -> List[T]:
        """
        Encodes a listing. A record that cannot form a valid resource is logged and skipped so
        one bad row does not hide the others.
        """
        resources = []
        for record in records:
            try:
                resources.append(encoder(record))
            except MappingError as e:
                logger.warning("Skipping backend record: %s", e.message)
        return resources
