import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends, Request, Response
from fastapi.responses import JSONResponse
from fhir.resources.R4B.resource import Resource

from app.container import get_operation_registry
from app.models.fhir.types import OperationKind, OperationResult
from app.routers.errors import FHIR_JSON, operation_outcome
from app.routers.security import require_bearer_token
from app.services.fhir.bundle import create_searchset
from app.services.fhir.capability_statement import create_capability_statement
from app.services.registry import (
    OperationRegistry,
    OperationRequest,
    operation_kind,
    resource_kind,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/fhir", tags=["FHIR"])


def to_response(result: Any) -> Response:
    if isinstance(result, OperationResult):
        status_code = 201 if result.created else 200
        headers = {"Location": result.location} if result.location else None
        verb = "Created" if result.created else "Updated"
        return JSONResponse(
            status_code=status_code,
            content=operation_outcome(
                f"{verb} {result.location or result.resource_type}", "informational", "information"
            ),
            media_type=FHIR_JSON,
            headers=headers,
        )

    if isinstance(result, list):
        result = create_searchset(result)

    if isinstance(result, Resource):
        return Response(content=result.model_dump_json(), media_type=FHIR_JSON)

    raise TypeError(f"Unsupported handler result {type(result).__name__}")


def query_params(request: Request) -> Dict[str, str]:
    return dict(request.query_params)


@router.get("/metadata", summary="CapabilityStatement of the server")
def metadata(registry: OperationRegistry = Depends(get_operation_registry)) -> Response:
    return to_response(create_capability_statement(registry))


@router.get("/{resource_type}/${operation}", summary="Run a named operation")
def run_operation(
    resource_type: str,
    operation: str,
    params: Dict[str, str] = Depends(query_params),
    token: str = Depends(require_bearer_token),
    registry: OperationRegistry = Depends(get_operation_registry),
) -> Response:
    request = OperationRequest(token=token, params=params)
    return to_response(
        registry.dispatch(resource_kind(resource_type), operation_kind(operation), request)
    )


@router.post("/{resource_type}/${operation}", summary="Run a named operation with a body")
def run_operation_with_body(
    resource_type: str,
    operation: str,
    body: Dict[str, Any] | None = Body(default=None),
    params: Dict[str, str] = Depends(query_params),
    token: str = Depends(require_bearer_token),
    registry: OperationRegistry = Depends(get_operation_registry),
) -> Response:
    request = OperationRequest(token=token, params=params, body=body)
    return to_response(
        registry.dispatch(resource_kind(resource_type), operation_kind(operation), request)
    )


@router.get("/{resource_type}/{resource_id}", summary="Read a resource by id")
def read(
    resource_type: str,
    resource_id: str,
    token: str = Depends(require_bearer_token),
    registry: OperationRegistry = Depends(get_operation_registry),
) -> Response:
    request = OperationRequest(token=token, resource_id=resource_id)
    return to_response(registry.dispatch(resource_kind(resource_type), OperationKind.READ, request))


@router.put("/{resource_type}/{resource_id}", summary="Update a resource")
def update(
    resource_type: str,
    resource_id: str,
    body: Dict[str, Any] = Body(...),
    token: str = Depends(require_bearer_token),
    registry: OperationRegistry = Depends(get_operation_registry),
) -> Response:
    request = OperationRequest(token=token, resource_id=resource_id, body=body)
    return to_response(
        registry.dispatch(resource_kind(resource_type), OperationKind.UPDATE, request)
    )


@router.get("/{resource_type}", summary="Search resources")
def search(
    resource_type: str,
    params: Dict[str, str] = Depends(query_params),
    token: str = Depends(require_bearer_token),
    registry: OperationRegistry = Depends(get_operation_registry),
) -> Response:
    request = OperationRequest(token=token, params=params)
    result: List[Resource] = registry.dispatch(
        resource_kind(resource_type), OperationKind.SEARCH, request
    )
    return to_response(result)


@router.post("/{resource_type}", summary="Create a resource")
def create(
    resource_type: str,
    body: Dict[str, Any] = Body(...),
    token: str = Depends(require_bearer_token),
    registry: OperationRegistry = Depends(get_operation_registry),
) -> Response:
    request = OperationRequest(token=token, body=body)
    return to_response(
        registry.dispatch(resource_kind(resource_type), OperationKind.CREATE, request)
    )
