from abc import ABC
import logging
from typing import Dict, Any

from requests import request, Response
from requests.exceptions import ConnectionError, RequestException, Timeout
from yarl import URL

from app.exceptions import InternalError

logger = logging.getLogger(__name__)


class HttpService(ABC):
    """
    Base class for making HTTP requests to the backend. Every request carries a timeout and is
    sent exactly once.
    """

    def __init__(self, base_url: str, timeout: int) -> None:
        self.base_url = base_url.rstrip("/")
        self.__timeout = timeout

    def do_request(
        self,
        method: str,
        sub_route: str | None = None,
        json: Dict[str, Any] | None = None,
        params: Dict[str, Any] | None = None,
        headers: Dict[str, str] | None = None,
        files: Any = None,
        data: Dict[str, Any] | None = None,
    ) -> Response:
        url = self.make_target_url(sub_route, params)

        try:
            logger.info(f"Making HTTP {method} request to {url}")
            return request(
                method=method,
                url=str(url),
                headers=headers,
                timeout=self.__timeout,
                json=json,
                files=files,
                data=data,
            )
        except (ConnectionError, Timeout) as e:
            logger.warning(f"Failed to make request to {url}: {e}")
            raise InternalError(f"Backend unreachable: {e.__class__.__name__}") from e
        except RequestException as e:
            logger.error(f"Request to {url} failed: {e}")
            raise InternalError(f"Backend request failed: {e}") from e

    def make_headers(self, authorization: str | None = None) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if authorization:
            headers["Authorization"] = authorization

        return headers

    def make_target_url(
        self, sub_route: str | None = None, params: Dict[str, Any] | None = None
    ) -> URL:
        url = self.base_url
        if sub_route:
            url = f"{url}/{sub_route.lstrip('/')}"

        target = URL(url)
        if params:
            return target.with_query({k: v for k, v in params.items() if v is not None})

        return target
