import logging
from typing import Any, Callable, Dict, Iterable, List, Tuple

from pydantic import BaseModel, Field

from app.exceptions import NotFoundError, ValidationError
from app.models.fhir.types import OperationKind, ResourceKind

logger = logging.getLogger(__name__)


class OperationRequest(BaseModel):
    token: str | None = None
    resource_id: str | None = None
    params: Dict[str, str] = Field(default_factory=dict)
    body: Dict[str, Any] | None = None

    def require_id(self) -> str:
        if not self.resource_id:
            raise ValidationError("A resource id is required")
        return self.resource_id

    def require_body(self) -> Dict[str, Any]:
        if self.body is None:
            raise ValidationError("A request body is required")
        return self.body

    def param(self, *names: str) -> str | None:
        for name in names:
            value = self.params.get(name)
            if value not in (None, ""):
                return value
        return None


Handler = Callable[[OperationRequest], Any]
OperationKey = Tuple[ResourceKind, OperationKind]


class OperationRegistry:
    """
    Explicit table of the FHIR operations the server supports. It is filled once at startup and
    only read afterwards.
    """

    def __init__(self) -> None:
        self.__handlers: Dict[OperationKey, Handler] = {}

    def register(self, kind: ResourceKind, operation: OperationKind, handler: Handler) -> None:
        key = (kind, operation)
        if key in self.__handlers:
            raise ValueError(f"Operation {operation.value} already registered for {kind.value}")
        self.__handlers[key] = handler

    def resolve(self, kind: ResourceKind, operation: OperationKind) -> Handler:
        handler = self.__handlers.get((kind, operation))
        if handler is None:
            raise NotFoundError(f"Operation {operation.value} is not supported for {kind.value}")
        return handler

    def dispatch(
        self, kind: ResourceKind, operation: OperationKind, request: OperationRequest
    ) -> Any:
        logger.debug("Dispatching %s %s", kind.value, operation.value)
        return self.resolve(kind, operation)(request)

    def validate(self, required: Iterable[OperationKey]) -> None:
        missing = [key for key in required if key not in self.__handlers]
        if missing:
            names = ", ".join(f"{k.value} {o.value}" for k, o in missing)
            raise ValueError(f"Missing handlers for required operations: {names}")

    def kinds(self) -> List[ResourceKind]:
        return [k for k in ResourceKind if any(key[0] == k for key in self.__handlers)]

    def operations(self, kind: ResourceKind) -> List[OperationKind]:
        return [o for o in OperationKind if (kind, o) in self.__handlers]


def resource_kind(resource_type: str) -> ResourceKind:
    try:
        return ResourceKind(resource_type)
    except ValueError:
        raise NotFoundError(f"Resource type {resource_type} is not supported")


def operation_kind(name: str) -> OperationKind:
    name = name if name.startswith("$") else f"${name}"
    for operation in OperationKind:
        if operation.is_custom and operation.value == name:
            return operation
    raise NotFoundError(f"Operation {name} is not supported")
