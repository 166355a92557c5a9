from typing import Any
from unittest.mock import MagicMock, patch

import pytest
from requests.exceptions import ConnectionError, Timeout

from app.exceptions import AuthenticationError, InternalError, NotFoundError, ValidationError
from app.services.api.backend_api import NON_JSON_MSG, BackendApi
from app.stats import MemoryClient, Statsd
from tests.test_config import TEST_API_URL
from tests.utils import MOCK_TOKEN, mock_response

PATCHED_MODULE = "app.services.api.api_service.request"


@patch(PATCHED_MODULE)
def test_get_forwards_token_and_returns_body(
    mock_request: MagicMock, backend_api: BackendApi
) -> None:
    mock_request.return_value = mock_response(200, [{"hash_id": "p1"}])

    body = backend_api.get("patient", MOCK_TOKEN, params={"hash_id": "p1", "fileType": None})

    assert body == [{"hash_id": "p1"}]
    mock_request.assert_called_once()
    kwargs = mock_request.call_args.kwargs
    assert kwargs["method"] == "GET"
    assert kwargs["url"] == f"{TEST_API_URL}/patient?hash_id=p1"
    assert kwargs["headers"] == {"Content-Type": "application/json", "Authorization": MOCK_TOKEN}
    assert kwargs["timeout"] == 1


@patch(PATCHED_MODULE)
def test_post_sends_json_body(mock_request: MagicMock, backend_api: BackendApi) -> None:
    mock_request.return_value = mock_response(201, {"hash_id": "p9"})

    body = backend_api.post("patient", MOCK_TOKEN, {"dni_paciente": "30111222"})

    assert body == {"hash_id": "p9"}
    assert mock_request.call_args.kwargs["json"] == {"dni_paciente": "30111222"}


@pytest.mark.parametrize("token", [None, "", "   "])
@patch(PATCHED_MODULE)
def test_missing_token_is_never_sent(
    mock_request: MagicMock, token: str | None, backend_api: BackendApi
) -> None:
    with pytest.raises(AuthenticationError):
        backend_api.get("patient", token)

    mock_request.assert_not_called()


@patch(PATCHED_MODULE)
def test_timeout_is_internal_error(mock_request: MagicMock, backend_api: BackendApi) -> None:
    mock_request.side_effect = Timeout("read timed out")

    with pytest.raises(InternalError, match="Backend unreachable"):
        backend_api.get("patient", MOCK_TOKEN)

    assert mock_request.call_count == 1


@patch(PATCHED_MODULE)
def test_connection_error_is_internal_error(
    mock_request: MagicMock, backend_api: BackendApi
) -> None:
    mock_request.side_effect = ConnectionError("refused")

    with pytest.raises(InternalError, match="Backend unreachable: ConnectionError"):
        backend_api.delete("user/u1", MOCK_TOKEN)


@patch(PATCHED_MODULE)
def test_error_status_uses_backend_message(
    mock_request: MagicMock, backend_api: BackendApi
) -> None:
    mock_request.return_value = mock_response(404, {"message": "not found"}, reason="Not Found")

    with pytest.raises(NotFoundError) as exc_info:
        backend_api.get("patient/p404", MOCK_TOKEN)

    assert exc_info.value.message == "not found"


@patch(PATCHED_MODULE)
def test_error_status_without_json_uses_status_line(
    mock_request: MagicMock, backend_api: BackendApi
) -> None:
    mock_request.return_value = mock_response(
        500, text="<html>oops</html>", reason="Internal Server Error"
    )

    with pytest.raises(InternalError) as exc_info:
        backend_api.get("patient", MOCK_TOKEN)

    assert exc_info.value.message == "500 Internal Server Error"


@patch(PATCHED_MODULE)
def test_conflict_is_validation_error(mock_request: MagicMock, backend_api: BackendApi) -> None:
    mock_request.return_value = mock_response(409, {"error": "DNI already exists"}, reason="Conflict")

    with pytest.raises(ValidationError, match="DNI already exists"):
        backend_api.post("patient", MOCK_TOKEN, {})


@patch(PATCHED_MODULE)
def test_non_json_success_is_internal_error(
    mock_request: MagicMock, backend_api: BackendApi
) -> None:
    mock_request.return_value = mock_response(200, text="<html>ok</html>")

    with pytest.raises(InternalError, match=NON_JSON_MSG):
        backend_api.get("patient", MOCK_TOKEN)


@patch(PATCHED_MODULE)
def test_empty_success_body_is_none(mock_request: MagicMock, backend_api: BackendApi) -> None:
    mock_request.return_value = mock_response(204, reason="No Content")

    assert backend_api.put("user/activate/u1", MOCK_TOKEN) is None


@patch(PATCHED_MODULE)
def test_upload_sends_multipart_with_authorization_only(
    mock_request: MagicMock, backend_api: BackendApi
) -> None:
    mock_request.return_value = mock_response(200, {"uploadedFiles": []})
    files = [("files", ("a.pdf", b"%PDF", "application/pdf"))]

    backend_api.upload("file/upload", MOCK_TOKEN, files=files, data={"hash_id": "p1"}, params={"hash_id": "p1"})

    kwargs = mock_request.call_args.kwargs
    assert kwargs["headers"] == {"Authorization": MOCK_TOKEN}
    assert kwargs["files"] == files
    assert kwargs["data"] == {"hash_id": "p1"}
    assert kwargs["json"] is None


@patch(PATCHED_MODULE)
def test_calls_are_counted_and_timed(mock_request: MagicMock) -> None:
    client = MemoryClient()
    api = BackendApi(base_url=TEST_API_URL, timeout=1, stats=Statsd(client))
    mock_request.return_value = mock_response(200, [])

    api.get("patient", MOCK_TOKEN)

    memory: Any = client.get_memory()
    assert memory["backend.get.200"] == 1
    assert len(memory["backend.get.response_time"]) == 1
