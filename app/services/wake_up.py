import logging
from threading import Thread

from requests import get
from requests.exceptions import RequestException

logger = logging.getLogger(__name__)


class BackendWakeUp:
    """
    Fire and forget ping of the backend health endpoint at startup, so a backend that scales
    to zero starts booting before the first real request arrives.
    """

    def __init__(self, health_url: str, timeout: int) -> None:
        self.__health_url = health_url
        self.__timeout = timeout
        self.__thread: Thread | None = None

    def start(self) -> None:
        if self.__thread is not None:
            return

        self.__thread = Thread(target=self.ping, name="backend-wake-up", daemon=True)
        self.__thread.start()

    def ping(self) -> bool:
        try:
            response = get(self.__health_url, timeout=self.__timeout)
        except RequestException as e:
            logger.debug(f"Backend wake-up ping to {self.__health_url} failed: {e}")
            return False

        logger.debug(f"Backend wake-up ping answered {response.status_code}")
        return response.ok
