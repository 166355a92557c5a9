from datetime import datetime, timezone
from typing import Any, Dict, List

from fhir.resources.R4B.capabilitystatement import CapabilityStatement

from app.services.fhir.model_factory import create_model
from app.services.registry import OperationRegistry

FHIR_VERSION = "4.3.0"


def _resource_entry(registry: OperationRegistry, kind: Any) -> Dict[str, Any]:
    operations = registry.operations(kind)
    entry: Dict[str, Any] = {
        "type": kind.value,
        "interaction": [{"code": op.value} for op in operations if not op.is_custom],
    }
    custom = [
        {
            "name": op.value[1:],
            "definition": f"OperationDefinition/{kind.value}-{op.value[1:]}",
        }
        for op in operations
        if op.is_custom
    ]
    if custom:
        entry["operation"] = custom
    return entry


def create_capability_statement(registry: OperationRegistry) -> CapabilityStatement:
    """
    Describes exactly what the registry supports, so the statement cannot drift from the
    handlers.
    """
    resources: List[Dict[str, Any]] = [
        _resource_entry(registry, kind) for kind in registry.kinds()
    ]

    return create_model(
        CapabilityStatement,
        {
            "resourceType": "CapabilityStatement",
            "status": "active",
            "date": datetime.now(timezone.utc).isoformat(),
            "kind": "instance",
            "fhirVersion": FHIR_VERSION,
            "format": ["json"],
            "implementation": {"description": "FHIR gateway for the EHR backend"},
            "rest": [
                {
                    "mode": "server",
                    "security": {
                        "description": "Bearer token in the Authorization header, forwarded to the backend"
                    },
                    "resource": resources,
                }
            ],
        },
    )
