import re
from typing import Any, Dict

import pytest

from app.models.fhir.types import DNI_SYSTEM, ResourceKind
from app.services.fhir.decoders.patient import decode_patient
from app.services.fhir.encoders.patient import encode_patient
from app.services.fhir.model_factory import parse_resource
from app.services.mapping.extension_codec import find_str

BASE = "http://mi-servidor.com/fhir/StructureDefinition"


def test_encode_patient(patient_record: Dict[str, Any]) -> None:
    patient = encode_patient(patient_record, BASE)

    assert patient.id == "p1"
    assert patient.name[0].given == ["Ana"]
    assert patient.name[0].family == "Diaz"
    assert str(patient.birthDate) == "1990-01-01"
    assert patient.telecom[0].system == "phone"
    assert patient.telecom[0].value == "112233"
    assert patient.active is True
    assert find_str(patient.extension, "inactivo") == "false"
    assert find_str(patient.extension, "hash-id") == "p1"
    assert patient.identifier[0].system == f"{BASE}/hash-id"
    assert patient.identifier[0].value == "p1"


def test_encode_patient_extensions_are_strings() -> None:
    record = {
        "hash_id": "p2",
        "dni_paciente": 30111222,
        "numero_calle": 742,
        "vive_con": "Madre",
        "tutores": [{"nombre": "Luis"}],
        "inactivo": 1,
    }

    patient = encode_patient(record, BASE)

    assert patient.active is False
    assert patient.identifier[1].system == DNI_SYSTEM
    assert patient.identifier[1].value == "30111222"
    assert patient.extension is not None
    numero = [e for e in patient.extension if e.url == f"{BASE}/numero"]
    assert numero[0].valueString == "742"
    assert find_str(patient.extension, "con_quien_vive") == "Madre"
    assert find_str(patient.extension, "tutores") == '[{"nombre": "Luis"}]'
    assert find_str(patient.extension, "inactivo") == "true"


def test_encode_patient_without_id_gets_temporary_id(caplog: Any) -> None:
    caplog.set_level("WARNING")
    patient = encode_patient({"nombre": "Ana"}, BASE)

    assert patient.id is not None
    assert re.fullmatch(r"patient-\d+-\d{4}", patient.id)
    assert "temporary id" in caplog.text
    assert patient.birthDate is None
    assert patient.telecom is None


def test_decode_patient_payload() -> None:
    patient = parse_resource(
        ResourceKind.PATIENT,
        {
            "resourceType": "Patient",
            "identifier": [{"system": DNI_SYSTEM, "value": "30111222"}],
            "name": [{"given": ["Ana", "Maria"], "family": "Diaz"}],
            "birthDate": "1990-01-01",
            "telecom": [{"system": "phone", "value": "11-2233"}],
            "extension": [
                {"url": f"{BASE}/numero", "valueString": "742"},
                {"url": f"{BASE}/numero_afiliado", "valueString": "A-9"},
                {"url": f"{BASE}/con_quien_vive", "valueString": "Madre"},
                {"url": f"{BASE}/tutores", "valueString": '[{"nombre": "Luis"}]'},
            ],
        },
    )

    payload = decode_patient(patient)  # type: ignore[arg-type]

    assert payload["dni_paciente"] == "30111222"
    assert payload["nombre_paciente"] == "Ana Maria"
    assert payload["apellido_paciente"] == "Diaz"
    assert payload["fecha_nacimiento"] == "1990-01-01"
    assert payload["telefono"] == 112233
    assert payload["numero_calle"] == "742"
    assert payload["numero_afiliado"] == "A-9"
    assert payload["vive_con"] == "Madre"
    assert payload["tutores"] == [{"nombre": "Luis"}]


def test_decode_patient_ignores_invalid_tutores(caplog: Any) -> None:
    caplog.set_level("WARNING")
    patient = parse_resource(
        ResourceKind.PATIENT,
        {"extension": [{"url": f"{BASE}/tutores", "valueString": "{not json"}]},
    )

    payload = decode_patient(patient)  # type: ignore[arg-type]

    assert payload["tutores"] == []
    assert payload["nombre_paciente"] == ""
    assert payload["apellido_paciente"] == ""
    assert "Ignoring invalid tutores" in caplog.text


@pytest.mark.parametrize("phone, expected", [("+54 11 2233", "+54 11 2233"), ("22-33", 2233)])
def test_decode_patient_phone(phone: str, expected: Any) -> None:
    patient = parse_resource(
        ResourceKind.PATIENT, {"telecom": [{"system": "phone", "value": phone}]}
    )

    assert decode_patient(patient)["telefono"] == expected  # type: ignore[arg-type]
