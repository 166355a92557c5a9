from contextlib import contextmanager
from datetime import timedelta
import time
from typing import Any, Callable, Awaitable, ContextManager, Generator

import statsd
from statsd.client.timer import Timer
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from app.config import get_config


class Stats:
    def timing(self, key: str, value: int) -> None:
        raise NotImplementedError

    def inc(self, key: str, count: int = 1, rate: int = 1) -> None:
        raise NotImplementedError

    def timer(self, key: str) -> ContextManager[Any]:
        raise NotImplementedError


class NoopStats(Stats):
    def timing(self, key: str, value: int) -> None:
        pass

    def inc(self, key: str, count: int = 1, rate: int = 1) -> None:
        pass

    def timer(self, key: str) -> ContextManager[Any]:
        @contextmanager
        def noop() -> Generator[None, None, None]:
            yield

        return noop()


class MemoryClient:
    """
    statsd compatible client that keeps everything in a dict. Used when stats are enabled
    without a statsd host, and in tests.
    """

    def __init__(self) -> None:
        self.memory: dict[str, Any] = {}

    def timer(self, stat: str, rate: int = 1) -> Timer:
        return Timer(self, stat, rate)

    def timing(self, stat: str, delta: timedelta | float, rate: int = 1) -> None:
        if isinstance(delta, timedelta):
            delta = delta.total_seconds() * 1000.0
        self.memory.setdefault(stat, []).append(delta)

    def incr(self, stat: str, count: int = 1, rate: int = 1) -> None:
        self.memory[stat] = self.memory.get(stat, 0) + count

    def get_memory(self) -> dict[str, Any]:
        return self.memory


class Statsd(Stats):
    def __init__(self, client: statsd.StatsClient | MemoryClient, prefix: str | None = None):
        self.client = client
        self.prefix = prefix

    def _key(self, key: str) -> str:
        return f"{self.prefix}.{key}" if self.prefix else key

    def timing(self, key: str, value: int) -> None:
        self.client.timing(self._key(key), value)

    def inc(self, key: str, count: int = 1, rate: int = 1) -> None:
        self.client.incr(self._key(key), count, rate)

    def timer(self, key: str) -> ContextManager[Any]:
        return self.client.timer(self._key(key))  # type: ignore[return-value]


_STATS: Stats = NoopStats()


def setup_stats() -> None:
    config = get_config()

    if config.stats.enabled is False:
        return
    in_memory = config.stats.host is None or config.stats.host == ""
    client = (
        MemoryClient()
        if in_memory
        else statsd.StatsClient(config.stats.host, config.stats.port or 8125)
    )
    global _STATS
    _STATS = Statsd(client, prefix=config.stats.module_name)


def set_stats(stats: Stats) -> None:
    global _STATS
    _STATS = stats


def get_stats() -> Stats:
    return _STATS


class StatsdMiddleware(BaseHTTPMiddleware):
    """
    Counts requests per route template and status, and records the response time. Route
    templates keep resource ids out of the metric names.
    """

    def __init__(self, app: ASGIApp, module_name: str):
        super().__init__(app)
        self.module_name = module_name

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        start_time = time.monotonic()
        response = await call_next(request)
        response_time = int((time.monotonic() - start_time) * 1000)

        route = request.scope.get("route")
        path = getattr(route, "path", request.url.path)
        key = f"{self.module_name}.http.{request.method.lower()}.{path}"
        get_stats().inc(f"{key}.{response.status_code}")
        get_stats().timing(f"{self.module_name}.http.response_time", response_time)

        return response
