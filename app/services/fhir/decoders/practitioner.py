from fhir.resources.R4B.practitioner import Practitioner

from app.exceptions import ValidationError
from app.models.backend.types import BackendRecord
from app.models.fhir.types import DNI_SYSTEM
from app.services.fhir.decoders.common import identifier_value, name_parts
from app.services.mapping.extension_codec import find_str


def practitioner_email(practitioner: Practitioner) -> str | None:
    for telecom in practitioner.telecom or []:
        if telecom.system == "email" and telecom.value:
            return telecom.value
    return None


def decode_practitioner(practitioner: Practitioner) -> BackendRecord:
    dni = identifier_value(practitioner.identifier, DNI_SYSTEM)
    if not dni:
        raise ValidationError(f"A practitioner needs an identifier with system {DNI_SYSTEM}")

    if practitioner.birthDate is None:
        raise ValidationError("A practitioner needs a birthDate")

    given, family = name_parts(practitioner.name)

    return {
        "user": {
            "dni_usuario": dni,
            "nombre_usuario": given,
            "apellido_usuario": family,
            "email": practitioner_email(practitioner),
            "fecha_nacimiento": str(practitioner.birthDate),
            "id_tipo_usuario": find_str(practitioner.extension, "id-tipo-usuario"),
        }
    }
