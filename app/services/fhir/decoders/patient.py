import json
import logging
from typing import Any, Dict, List

from fhir.resources.R4B.patient import Patient

from app.models.backend.types import BackendRecord
from app.models.fhir.types import DNI_SYSTEM
from app.services.fhir.decoders.common import identifier_value, name_parts
from app.services.mapping.extension_codec import index_by_key
from app.services.mapping.field_extractor import as_phone, as_str

logger = logging.getLogger(__name__)

# extension short key -> backend write key
PATIENT_WRITE_FIELDS = {
    "id_ciudad": "id_ciudad",
    "barrio": "barrio",
    "calle": "calle",
    "numero": "numero_calle",
    "id_prestacion": "id_prestacion",
    "piso_departamento": "piso_departamento",
    "con_quien_vive": "vive_con",
    "id_mutual": "id_mutual",
    "numero_afiliado": "numero_afiliado",
    "ocupacion_actual": "ocupacion_actual",
    "ocupacion_anterior": "ocupacion_anterior",
}


def _tutores(raw: Any) -> List[Any]:
    if raw is None:
        return []
    try:
        tutores = json.loads(raw) if isinstance(raw, str) else raw
    except json.JSONDecodeError as e:
        logger.warning("Ignoring invalid tutores JSON: %s", e)
        return []
    if not isinstance(tutores, list):
        logger.warning("Ignoring tutores that is not a list")
        return []
    return tutores


def decode_patient(patient: Patient) -> BackendRecord:
    """
    Builds the payload accepted by both the create and the update patient endpoints.
    """
    given, family = name_parts(patient.name)

    payload: Dict[str, Any] = {
        "dni_paciente": identifier_value(patient.identifier, DNI_SYSTEM),
        "nombre_paciente": given,
        "apellido_paciente": family,
    }

    if patient.birthDate is not None:
        payload["fecha_nacimiento"] = str(patient.birthDate)

    if patient.telecom:
        phone = as_phone(patient.telecom[0].value)
        if phone is not None:
            payload["telefono"] = phone

    index = index_by_key(patient.extension, [*PATIENT_WRITE_FIELDS, "tutores"])
    for key, backend_key in PATIENT_WRITE_FIELDS.items():
        value = as_str(index.get(key))
        if value is not None:
            payload[backend_key] = value

    if "tutores" in index:
        payload["tutores"] = _tutores(index["tutores"])

    return payload
