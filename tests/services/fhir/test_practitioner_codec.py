import pytest

from app.exceptions import ValidationError
from app.models.fhir.types import DNI_SYSTEM, ResourceKind, USER_TYPE_SYSTEM
from app.services.fhir.decoders.practitioner import decode_practitioner
from app.services.fhir.encoders.practitioner import encode_practitioner, encode_user_types
from app.services.fhir.model_factory import parse_resource
from app.services.mapping.extension_codec import find_str

BASE = "http://mi-servidor.com/fhir/StructureDefinition"


def test_encode_practitioner() -> None:
    record = {
        "hash_id": "u1",
        "dni_usuario": "20111222",
        "nombre_usuario": "Juan Carlos",
        "apellido_usuario": "Perez",
        "email": "juan@example.com",
        "fecha_nacimiento": "1985-05-05T00:00:00.000Z",
        "id_tipo_usuario": 2,
        "inactivo": 0,
    }

    practitioner = encode_practitioner(record, BASE)

    assert practitioner.id == "u1"
    assert practitioner.active is True
    assert practitioner.identifier[0].system == DNI_SYSTEM
    assert practitioner.identifier[0].value == "20111222"
    assert practitioner.name[0].given == ["Juan", "Carlos"]
    assert practitioner.telecom[0].value == "juan@example.com"
    assert str(practitioner.birthDate) == "1985-05-05"
    assert find_str(practitioner.extension, "id-tipo-usuario") == "2"


def test_encode_user_types() -> None:
    value_set = encode_user_types(
        [
            {"id_tipo_usuario": 1, "nombre": "Medico"},
            {"id_tipo_usuario": 2},
            {"nombre": "sin codigo"},
        ]
    )

    include = value_set.compose.include[0]
    assert value_set.id == "user-types"
    assert include.system == USER_TYPE_SYSTEM
    assert [(c.code, c.display) for c in include.concept] == [
        ("1", "Medico"),
        ("2", "Tipo de Usuario 2"),
    ]


def test_encode_user_types_empty() -> None:
    value_set = encode_user_types([])

    assert value_set.compose.include[0].concept is None


def test_decode_practitioner() -> None:
    practitioner = parse_resource(
        ResourceKind.PRACTITIONER,
        {
            "identifier": [{"system": DNI_SYSTEM, "value": "20111222"}],
            "name": [{"given": ["Juan"], "family": "Perez"}],
            "telecom": [
                {"system": "phone", "value": "112233"},
                {"system": "email", "value": "juan@example.com"},
            ],
            "birthDate": "1985-05-05",
            "extension": [{"url": f"{BASE}/id-tipo-usuario", "valueString": "2"}],
        },
    )

    assert decode_practitioner(practitioner) == {  # type: ignore[arg-type]
        "user": {
            "dni_usuario": "20111222",
            "nombre_usuario": "Juan",
            "apellido_usuario": "Perez",
            "email": "juan@example.com",
            "fecha_nacimiento": "1985-05-05",
            "id_tipo_usuario": "2",
        }
    }


def test_decode_practitioner_requires_dni() -> None:
    practitioner = parse_resource(ResourceKind.PRACTITIONER, {"birthDate": "1985-05-05"})

    with pytest.raises(ValidationError, match="identifier"):
        decode_practitioner(practitioner)  # type: ignore[arg-type]


def test_decode_practitioner_requires_birth_date() -> None:
    practitioner = parse_resource(
        ResourceKind.PRACTITIONER, {"identifier": [{"system": DNI_SYSTEM, "value": "20111222"}]}
    )

    with pytest.raises(ValidationError, match="birthDate"):
        decode_practitioner(practitioner)  # type: ignore[arg-type]
