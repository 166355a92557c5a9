from unittest.mock import MagicMock

import pytest

from app.services.api.backend_api import BackendApi


@pytest.fixture
def api() -> MagicMock:
    return MagicMock(spec=BackendApi)
