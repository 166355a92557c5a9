from collections.abc import Generator
from typing import Any, Dict

from fastapi import FastAPI
from fastapi.testclient import TestClient
import inject
import pytest

from app.application import create_fastapi_app
from app.config import set_config
from app.services.api.backend_api import BackendApi
from app.stats import NoopStats
from tests.test_config import TEST_API_URL, get_test_config
from tests.utils import MOCK_TOKEN


@pytest.fixture
def fastapi_app() -> Generator[FastAPI, None, None]:
    set_config(get_test_config())
    app = create_fastapi_app()
    yield app
    inject.clear()


@pytest.fixture
def api_client(fastapi_app: FastAPI) -> TestClient:
    return TestClient(fastapi_app)


@pytest.fixture
def auth_headers() -> Dict[str, str]:
    return {"Authorization": MOCK_TOKEN}


@pytest.fixture
def backend_api() -> BackendApi:
    return BackendApi(base_url=TEST_API_URL, timeout=1, stats=NoopStats())


@pytest.fixture
def patient_record() -> Dict[str, Any]:
    return {
        "hash_id": "p1",
        "nombre": "Ana",
        "apellido": "Diaz",
        "fecha_nacimiento": "1990-01-01",
        "telefono": "11-2233",
        "inactivo": False,
    }


@pytest.fixture
def history_record() -> Dict[str, Any]:
    return {
        "id_hc_fisiatrica": "hc-1",
        "fecha_creacion": "2024-03-01T10:15:00.000Z",
        "evaluacion_consulta": '{"derivados_por": "Dr. Perez", "medicacion_actual": "Ibuprofeno"}',
        "antecedentes": {
            "hereditarios": "Diabetes",
            "fisiologico": {"dormir": "Normal", "periodo_menstrual": "Regular"},
        },
        "examen_fisico": {
            "cabeza_sentidos": {"ojos": "Sin particularidades"},
            "tronco_extremidades": {"columna_vertebral": "Escoliosis leve"},
        },
        "diagnostico_funcional": {
            "diagnostico_funcional": "Lumbalgia",
            "conducta_seguir": "Kinesiologia",
        },
    }
