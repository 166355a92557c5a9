from typing import Any, Dict

import pytest

from app.exceptions import ValidationError
from app.models.fhir.types import LOINC_SYSTEM
from app.services.fhir.decoders.fisiatric_history import decode_fisiatric_history
from app.services.fhir.encoders.fisiatric_history import (
    HISTORY_HEADER,
    HISTORY_LOINC_CODE,
    encode_fisiatric_history,
    extract_sections,
)
from app.services.mapping.extension_codec import find_str

BASE = "http://mi-servidor.com/fhir/StructureDefinition"


def test_extract_sections_camelizes_stored_keys(history_record: Dict[str, Any]) -> None:
    sections = extract_sections(history_record)

    assert sections["evaluacionConsulta"]["derivadosPor"] == "Dr. Perez"
    assert sections["antecedentes"]["fisiologico"]["periodoMenstrual"] == "Regular"
    assert sections["examenFisico"]["troncoExtremidades"]["columnaVertebral"] == "Escoliosis leve"
    assert "anamnesisSistemica" not in sections


def test_extract_sections_drops_invalid_section(
    history_record: Dict[str, Any], caplog: Any
) -> None:
    caplog.set_level("WARNING")
    history_record["anamnesis_sistemica"] = "{broken"

    sections = extract_sections(history_record)

    assert "anamnesisSistemica" not in sections
    assert "evaluacionConsulta" in sections
    assert "Dropping section anamnesisSistemica" in caplog.text


def test_encode_fisiatric_history(history_record: Dict[str, Any]) -> None:
    report = encode_fisiatric_history(history_record, "p1", BASE)

    assert report.id == "hc-1"
    assert report.status == "final"
    assert report.code.coding[0].system == LOINC_SYSTEM
    assert report.code.coding[0].code == HISTORY_LOINC_CODE
    assert report.subject.reference == "Patient/p1"
    assert report.effectiveDateTime is not None

    assert find_str(report.extension, "historia-tipo") == "fisiatrica"
    assert find_str(report.extension, "derivados-por") == "Dr. Perez"
    assert find_str(report.extension, "examen-columna-vertebral") == "Escoliosis leve"
    assert find_str(report.extension, "conducta-objetivos") == "Kinesiologia"
    assert find_str(report.extension, "examen-actitud") is None

    conclusion = report.conclusion or ""
    assert conclusion.startswith(HISTORY_HEADER)
    assert "EVALUACIÓN DE LA CONSULTA:\n- DERIVADOS POR: Dr. Perez\n- MEDICACION ACTUAL: Ibuprofeno" in conclusion
    assert "DATOS FISIOLÓGICOS:\n- DORMIR: Normal\n- PERIODO MENSTRUAL: Regular" in conclusion
    assert "CONDUCTA A SEGUIR:\n- CONDUCTA SEGUIR: Kinesiologia" in conclusion
    assert "ANAMNESIS" not in conclusion


def test_encode_fisiatric_history_patient_from_record(history_record: Dict[str, Any]) -> None:
    history_record["hash_id_paciente"] = "p7"

    report = encode_fisiatric_history(history_record, base_url=BASE)

    assert report.subject.reference == "Patient/p7"


def test_encode_fisiatric_history_id_falls_back_to_hash_id() -> None:
    report = encode_fisiatric_history({"hash_id": "h9"}, "p1", BASE)

    assert report.id == "h9"


def test_decode_fisiatric_history(history_record: Dict[str, Any]) -> None:
    report = encode_fisiatric_history(history_record, "p1", BASE)

    payload = decode_fisiatric_history(report)
    history = payload["hc_fisiatric"]

    assert payload["hash_id"] == "p1"
    assert history["evaluacionConsulta"]["derivadosPor"] == "Dr. Perez"
    assert history["examenFisico"]["cabezaSentidos"]["ojos"] == "Sin particularidades"
    assert history["examenFisico"]["cabezaSentidos"]["boca"] == ""
    assert history["diagnosticoFuncional"]["diagnosticoFuncional"] == "Lumbalgia"
    assert history["anamnesisSistemica"] == {"comunicacion": "", "motricidad": "", "vidaDiaria": ""}


def test_decode_fisiatric_history_requires_patient(history_record: Dict[str, Any]) -> None:
    report = encode_fisiatric_history(history_record, base_url=BASE)

    with pytest.raises(ValidationError):
        decode_fisiatric_history(report)

    assert decode_fisiatric_history(report, "p2")["hash_id"] == "p2"
