import json
import logging
from typing import Any, Dict, List, Tuple

from fhir.resources.R4B.patient import Patient

from app.models.backend.types import BackendRecord
from app.models.fhir.types import DNI_SYSTEM, EXTENSION_BASE_URL
from app.services.fhir.encoders.common import compact, temporary_id
from app.services.fhir.model_factory import create_model
from app.services.mapping.extension_codec import build_extensions, extension_url
from app.services.mapping.field_extractor import (
    as_bool,
    as_date,
    get,
    get_str,
    is_active,
    normalize_phone,
)

logger = logging.getLogger(__name__)

# (namespace key, backend keys in lookup order)
PATIENT_EXTENSION_FIELDS: List[Tuple[str, Tuple[str, ...]]] = [
    ("hash-id", ("hash_id",)),
    ("hash-id-ehr", ("hash_id_ehr", "hash_id_EHR")),
    ("prestacion", ("prestacion",)),
    ("id_prestacion", ("id_prestacion",)),
    ("calle", ("calle",)),
    ("barrio", ("barrio",)),
    ("id_ciudad", ("id_ciudad",)),
    ("piso_departamento", ("piso_departamento",)),
    ("numero", ("numero", "numero_calle")),
    ("id_provincia", ("id_provincia",)),
    ("con_quien_vive", ("con_quien_vive", "vive_con")),
    ("id_mutual", ("id_mutual",)),
    ("numero_afiliado", ("numero_afiliado",)),
    ("ocupacion_actual", ("ocupacion_actual",)),
    ("ocupacion_anterior", ("ocupacion_anterior",)),
]


def _identifiers(record: BackendRecord, patient_id: str, base_url: str) -> List[Dict[str, Any]]:
    identifiers = [{"system": extension_url("hash-id", base_url), "value": patient_id}]
    dni = get_str(record, "dni_paciente", "dni")
    if dni:
        identifiers.append({"system": DNI_SYSTEM, "value": dni})
    return identifiers


def _name(record: BackendRecord) -> List[Dict[str, Any]]:
    given = get_str(record, "nombre", "nombre_paciente")
    family = get_str(record, "apellido", "apellido_paciente")
    if not given and not family:
        return []
    return [compact({"given": given.split() if given else None, "family": family})]


def _extension_values(record: BackendRecord) -> List[Tuple[str, Any]]:
    values: List[Tuple[str, Any]] = [
        (key, get_str(record, *keys)) for key, keys in PATIENT_EXTENSION_FIELDS
    ]

    if record.get("inactivo") is not None:
        values.append(("inactivo", "true" if as_bool(record["inactivo"]) else "false"))

    tutores = record.get("tutores")
    if tutores is not None and not isinstance(tutores, str):
        tutores = json.dumps(tutores, ensure_ascii=False)
    values.append(("tutores", tutores))

    return values


def encode_patient(record: BackendRecord, base_url: str = EXTENSION_BASE_URL) -> Patient:
    patient_id = get_str(record, "hash_id") or temporary_id("patient")

    phone = normalize_phone(get(record, "telefono"))
    birth_date = as_date(get(record, "fecha_nacimiento"))

    data = compact({
        "resourceType": "Patient",
        "id": patient_id,
        "identifier": _identifiers(record, patient_id, base_url),
        "active": is_active(record),
        "name": _name(record),
        "telecom": [{"system": "phone", "value": phone}] if phone else None,
        "birthDate": birth_date.isoformat() if birth_date else None,
        "extension": build_extensions(_extension_values(record), base_url),
    })

    return create_model(Patient, data)
