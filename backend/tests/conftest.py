# backend/tests/conftest.py
import os, sys, random, pathlib, pytest
from fastapi.testclient import TestClient

BACKEND_DIR = pathlib.Path(__file__).resolve().parents[1]   # .../backend

# Make `from livedash.*` importable without an install
sys.path.insert(0, str(BACKEND_DIR))

# Importing livedash.main builds a module-level app; keep it from ticking on its own.
os.environ.setdefault("SIM_AUTOSTART", "0")

from livedash.engine.store import MetricsStateStore  # noqa: E402
from livedash.main import create_app  # noqa: E402
from livedash.session import DashboardSession  # noqa: E402
from livedash.settings import Settings  # noqa: E402

SEED = 1234


@pytest.fixture()
def rng():
    return random.Random(SEED)


@pytest.fixture()
def store(rng):
    return MetricsStateStore(rng=rng)


@pytest.fixture()
def settings():
    return Settings(tick_interval_ms=10, seed=SEED, autostart=False)


@pytest.fixture()
def session(settings):
    return DashboardSession(settings)


@pytest.fixture()
def client(session):
    # Context-managed so the lifespan runs and async endpoints share one event loop.
    with TestClient(create_app(session=session)) as c:
        yield c
