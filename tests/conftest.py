import pytest

from signup_suite.env_defaults import reload_env_defaults
from signup_suite.lifecycle import SessionLifecycleManager
from signup_suite.reporting import ReportSink
from tests.fakes import FakeEngineFactory

HARNESS_ENV_KEYS = (
    "BASE_URL", "BROWSER", "browser", "HEADLESS", "headless", "SLOW_MO", "slowMo",
    "VIEWPORT_WIDTH", "VIEWPORT_HEIGHT", "IGNORE_HTTPS_ERRORS", "DEFAULT_TIMEOUT_MS",
    "LAUNCH_TIMEOUT_MS", "ARTIFACT_DIR", "API_TIMEOUT",
)


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Environment without harness keys and with an empty ``.env`` file."""
    for key in HARNESS_ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    env_file = tmp_path / ".env"
    env_file.write_text("", encoding="utf-8")
    monkeypatch.setenv("SIGNUP_SUITE_ENV_FILE", str(env_file))
    reload_env_defaults()
    yield env_file
    reload_env_defaults()


@pytest.fixture
def engine_factory():
    return FakeEngineFactory()


@pytest.fixture
def manager(engine_factory):
    return SessionLifecycleManager(engine_factory=engine_factory)


@pytest.fixture
def sink():
    return ReportSink()
