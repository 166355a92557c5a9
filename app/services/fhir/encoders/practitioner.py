from typing import Any, Dict, List

from fhir.resources.R4B.practitioner import Practitioner
from fhir.resources.R4B.valueset import ValueSet

from app.models.backend.types import BackendRecord
from app.models.fhir.types import (
    DNI_SYSTEM,
    EXTENSION_BASE_URL,
    USER_TYPE_SYSTEM,
    USER_TYPE_VALUESET_URL,
)
from app.services.fhir.encoders.common import compact, temporary_id
from app.services.fhir.model_factory import create_model
from app.services.mapping.extension_codec import build_extensions
from app.services.mapping.field_extractor import as_date, get, get_str, is_active


def encode_practitioner(
    record: BackendRecord, base_url: str = EXTENSION_BASE_URL
) -> Practitioner:
    dni = get_str(record, "dni_usuario", "dni")
    given = get_str(record, "nombre_usuario", "nombre")
    family = get_str(record, "apellido_usuario", "apellido")
    email = get_str(record, "email")
    birth_date = as_date(get(record, "fecha_nacimiento"))

    data = compact({
        "resourceType": "Practitioner",
        "id": get_str(record, "hash_id") or temporary_id("practitioner"),
        "identifier": [{"system": DNI_SYSTEM, "value": dni}] if dni else None,
        "active": is_active(record),
        "name": [compact({"given": given.split() if given else None, "family": family})]
        if given or family
        else None,
        "telecom": [{"system": "email", "value": email}] if email else None,
        "birthDate": birth_date.isoformat() if birth_date else None,
        "extension": build_extensions(
            [("id-tipo-usuario", get_str(record, "id_tipo_usuario"))], base_url
        ),
    })

    return create_model(Practitioner, data)


def user_type_display(record: BackendRecord) -> str:
    display = get_str(record, "nombre", "descripcion", "tipo", "name")
    if display:
        return display
    return f"Tipo de Usuario {get_str(record, 'id_tipo_usuario')}"


def encode_user_types(records: List[BackendRecord]) -> ValueSet:
    concepts: List[Dict[str, Any]] = []
    for record in records:
        code = get_str(record, "id_tipo_usuario")
        if code is None:
            continue
        concepts.append({"code": code, "display": user_type_display(record)})

    include: Dict[str, Any] = {"system": USER_TYPE_SYSTEM}
    if concepts:
        include["concept"] = concepts

    return create_model(
        ValueSet,
        {
            "resourceType": "ValueSet",
            "id": "user-types",
            "url": USER_TYPE_VALUESET_URL,
            "version": "1.0.0",
            "name": "UserTypes",
            "title": "Tipos de Usuarios",
            "status": "active",
            "compose": {"include": [include]},
        },
    )
