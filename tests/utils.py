import json
from typing import Any
from unittest.mock import MagicMock

from requests import JSONDecodeError

MOCK_TOKEN = "Bearer some-token"


def mock_response(
    status_code: int = 200,
    json_data: Any = None,
    text: str | None = None,
    reason: str = "OK",
) -> MagicMock:
    """
    Stand-in for a requests.Response. The body is the JSON encoding of json_data unless a raw
    text body is given.
    """
    body = text if text is not None else ("" if json_data is None else json.dumps(json_data))

    response = MagicMock()
    response.status_code = status_code
    response.reason = reason
    response.text = body
    response.content = body.encode()
    response.ok = 200 <= status_code < 400
    if text is None:
        response.json.return_value = json_data
    else:
        response.json.side_effect = JSONDecodeError("Expecting value", text, 0)

    return response
