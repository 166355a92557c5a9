import logging
from typing import Any, Dict

from pydantic import BaseModel
from requests import JSONDecodeError, Response

from app.exceptions import AuthenticationError, InternalError
from app.models.fhir.types import HttpValidVerbs
from app.services.api.api_service import HttpService
from app.services.api.error_translator import translate_backend_error
from app.stats import Stats, get_stats

logger = logging.getLogger(__name__)

NON_JSON_MSG = "The backend returned a response that is not JSON"


class BackendResponse(BaseModel):
    status_code: int
    body: Any = None


class BackendApi(HttpService):
    """
    Gateway to the EHR backend. The caller's Authorization header is forwarded as is, every
    non 2xx answer is turned into a domain error.
    """

    def __init__(self, base_url: str, timeout: int, stats: Stats | None = None) -> None:
        super().__init__(base_url=base_url, timeout=timeout)
        self.__stats = stats

    @property
    def stats(self) -> Stats:
        return self.__stats if self.__stats is not None else get_stats()

    def call(
        self,
        method: HttpValidVerbs,
        path: str,
        bearer_token: str | None,
        body: Dict[str, Any] | None = None,
        params: Dict[str, Any] | None = None,
    ) -> BackendResponse:
        self.__check_token(bearer_token, method, path)

        with self.stats.timer(f"backend.{method.lower()}.response_time"):
            response = self.do_request(
                method,
                sub_route=path,
                json=body,
                params=params,
                headers=self.make_headers(bearer_token),
            )

        return self.__handle_response(method, response)

    def get(self, path: str, bearer_token: str | None, params: Dict[str, Any] | None = None) -> Any:
        return self.call("GET", path, bearer_token, params=params).body

    def post(
        self,
        path: str,
        bearer_token: str | None,
        body: Dict[str, Any] | None = None,
        params: Dict[str, Any] | None = None,
    ) -> Any:
        return self.call("POST", path, bearer_token, body=body, params=params).body

    def put(self, path: str, bearer_token: str | None, body: Dict[str, Any] | None = None) -> Any:
        return self.call("PUT", path, bearer_token, body=body).body

    def delete(self, path: str, bearer_token: str | None) -> Any:
        return self.call("DELETE", path, bearer_token).body

    def upload(
        self,
        path: str,
        bearer_token: str | None,
        files: Any,
        data: Dict[str, Any],
        params: Dict[str, Any] | None = None,
    ) -> Any:
        """
        Multipart forward. requests sets the multipart content type and boundary itself.
        """
        self.__check_token(bearer_token, "POST", path)

        with self.stats.timer("backend.upload.response_time"):
            response = self.do_request(
                "POST",
                sub_route=path,
                params=params,
                headers={"Authorization": bearer_token},  # type: ignore[dict-item]
                files=files,
                data=data,
            )

        return self.__handle_response("POST", response).body

    def __check_token(self, bearer_token: str | None, method: str, path: str) -> None:
        if bearer_token is None or bearer_token.strip() == "":
            logger.warning(f"Refusing {method} {path} without credentials")
            raise AuthenticationError("Authorization header is required")

    def __handle_response(self, method: str, response: Response) -> BackendResponse:
        self.stats.inc(f"backend.{method.lower()}.{response.status_code}")

        if not 200 <= response.status_code < 300:
            reason = response.reason or ""
            default_message = f"{response.status_code} {reason}".strip()
            raise translate_backend_error(response.status_code, response.text, default_message)

        if not response.content:
            return BackendResponse(status_code=response.status_code)

        try:
            data = response.json()
        except JSONDecodeError:
            logger.error("Failed to decode JSON response: %s", response.text)
            raise InternalError(NON_JSON_MSG)

        return BackendResponse(status_code=response.status_code, body=data)
