import sys
import pathlib

import pytest

# Ensure project root is on sys.path so 'import uaengine' works when pytest runs from
# different working directories or when running individual tests.
_ROOT = pathlib.Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from uaengine import create_app
from uaengine.config import get_settings
from uaengine.engine import Engine
from uaengine.logging_utils import reset_suppressed_state


@pytest.fixture(autouse=True)
def _fresh_settings():
    # settings are memoized; tests that monkeypatch env must see their values
    get_settings.cache_clear()
    reset_suppressed_state()
    yield
    get_settings.cache_clear()


@pytest.fixture
def engine():
    return Engine(enable_plugins=True)


@pytest.fixture
def app():
    app = create_app({'RATELIMIT_ENABLED': False})
    app.testing = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()
