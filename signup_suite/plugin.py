"""
pytest integration: one browser session per test.

Load it from the root ``conftest.py``:

    pytest_plugins = ["signup_suite.plugin"]

Fixtures:
    browser_session  - the test's ``SessionHandle``; created before the test,
                       screenshot on failure, then torn down
    page             - the session's page, never handed out closed
    page_provider    - coroutine returning a live page (re-creates the session
                       if the current page was closed mid-test)
    api_client       - ``UserApiClient`` bound to the target URL
    report_sink      - run-wide attachment sink
"""
from __future__ import annotations

import logging
import os
from typing import Any, Awaitable, Callable, Dict, Hashable, Optional

import pytest
import pytest_asyncio
from playwright.async_api import Page

from signup_suite.api_client import UserApiClient
from signup_suite.config import BrowserSettings, ConfigError, HarnessSettings, parse_bool
from signup_suite.lifecycle import EngineFactory, SessionLifecycleManager
from signup_suite.observer import FailureObserver, TestOutcome
from signup_suite.reporting import ReportSink

logger = logging.getLogger(__name__)

_SETTINGS_KEY = pytest.StashKey[HarnessSettings]()
_SINK_KEY = pytest.StashKey[ReportSink]()
_REPORTS_KEY = pytest.StashKey[Dict[str, pytest.TestReport]]()


def pytest_addoption(parser: pytest.Parser) -> None:
    group = parser.getgroup("signup-suite", "browser session harness")
    group.addoption("--engine", default=None, help="Browser engine: chromium, firefox or webkit")
    group.addoption(
        "--no-headless",
        action="store_true",
        default=False,
        help="Show the browser window (slow-mo defaults to 100 ms)",
    )
    group.addoption("--slow-mo", default=None, help="Delay in ms between browser actions")
    group.addoption("--target-url", default=None, help="Base URL of the application under test")
    group.addoption("--artifact-dir", default=None, help="Write screenshots and API dumps here")
    group.addoption(
        "--live",
        action="store_true",
        default=False,
        help="Run tests marked 'live' against the real application",
    )
    group.addoption("--harness-log-level", default=None, help="Log level for signup_suite loggers")


def _cli_overrides(config: pytest.Config) -> Dict[str, Any]:
    return {
        "BROWSER": config.getoption("--engine"),
        "HEADLESS": False if config.getoption("--no-headless") else None,
        "SLOW_MO": config.getoption("--slow-mo"),
        "BASE_URL": config.getoption("--target-url"),
        "ARTIFACT_DIR": config.getoption("--artifact-dir"),
    }


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "live: talks to the real application (needs --live)")

    level = config.getoption("--harness-log-level")
    if level:
        logging.getLogger("signup_suite").setLevel(level.upper())

    try:
        settings = HarnessSettings.resolve(_cli_overrides(config))
    except ConfigError as exc:
        raise pytest.UsageError(f"Invalid harness configuration: {exc}") from exc

    config.stash[_SETTINGS_KEY] = settings
    config.stash[_SINK_KEY] = ReportSink(settings.artifact_dir)


def _live_enabled(config: pytest.Config) -> bool:
    if config.getoption("--live"):
        return True
    try:
        return parse_bool(os.getenv("RUN_LIVE_TESTS", "0"), "RUN_LIVE_TESTS")
    except ConfigError:
        return False


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    if _live_enabled(config):
        return
    skip_live = pytest.mark.skip(reason="live test: pass --live or set RUN_LIVE_TESTS=1")
    for item in items:
        if "live" in item.keywords:
            item.add_marker(skip_live)


@pytest.hookimpl(hookwrapper=True, tryfirst=True)
def pytest_runtest_makereport(item: pytest.Item, call: pytest.CallInfo) -> Any:
    """Remember each phase's report so fixture teardown can see the outcome."""
    outcome = yield
    report = outcome.get_result()
    item.stash.setdefault(_REPORTS_KEY, {})[report.when] = report


def recorded_outcome(item: pytest.Item) -> str:
    """Outcome of the setup and call phases recorded so far."""
    reports = item.stash.get(_REPORTS_KEY, {})
    phases = [reports[when] for when in ("setup", "call") if when in reports]
    if any(report.failed for report in phases):
        return TestOutcome.FAILED
    if any(report.skipped for report in phases):
        return TestOutcome.SKIPPED
    return TestOutcome.PASSED


async def ensure_page(
    manager: SessionLifecycleManager,
    settings: BrowserSettings,
    unit: Hashable,
) -> Page:
    """Return the unit's page, starting a new session if it is missing or closed."""
    handle = manager.current_session(unit)
    if handle is None or handle.is_closed:
        logger.info(f"Session for {unit} missing or closed, starting a new one")
        handle = await manager.create_session(settings, unit=unit)
    return handle.page


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture(scope="session")
def harness_settings(pytestconfig: pytest.Config) -> HarnessSettings:
    return pytestconfig.stash[_SETTINGS_KEY]


@pytest.fixture(scope="session")
def browser_settings(harness_settings: HarnessSettings) -> BrowserSettings:
    return harness_settings.browser


@pytest.fixture(scope="session")
def report_sink(pytestconfig: pytest.Config) -> ReportSink:
    return pytestconfig.stash[_SINK_KEY]


@pytest.fixture(scope="session")
def session_engine_factory() -> Optional[EngineFactory]:
    """Override to launch sessions from something other than real Playwright."""
    return None


@pytest.fixture(scope="session")
def lifecycle_manager(session_engine_factory):
    manager = SessionLifecycleManager(engine_factory=session_engine_factory)
    yield manager
    if manager.active_sessions:
        logger.warning(f"{manager.active_sessions} browser session(s) still registered at end of run")


@pytest.fixture(scope="session")
def failure_observer(lifecycle_manager: SessionLifecycleManager, report_sink: ReportSink) -> FailureObserver:
    return FailureObserver(lifecycle_manager, report_sink)


@pytest_asyncio.fixture()
async def browser_session(request, lifecycle_manager, failure_observer, browser_settings):
    """Browser session for one test.

    Teardown takes the failure screenshot first and closes the session after,
    whatever the outcome.
    """
    unit = request.node.nodeid
    handle = await lifecycle_manager.create_session(browser_settings, unit=unit)
    try:
        yield handle
    finally:
        attachment = await failure_observer.on_test_concluded(unit, recorded_outcome(request.node))
        if attachment is not None:
            location = str(attachment.path) if attachment.path else attachment.name
            request.node.user_properties.append(("screenshot", location))
        await lifecycle_manager.close_session(unit)


@pytest_asyncio.fixture()
async def page(request, browser_session, lifecycle_manager, browser_settings) -> Page:
    return await ensure_page(lifecycle_manager, browser_settings, request.node.nodeid)


@pytest.fixture()
def page_provider(request, browser_session, lifecycle_manager, browser_settings) -> Callable[[], Awaitable[Page]]:
    """Factory for a live page, for tests that may close theirs mid-way."""
    unit = request.node.nodeid

    async def _provide() -> Page:
        return await ensure_page(lifecycle_manager, browser_settings, unit)

    return _provide


@pytest.fixture()
def api_client(harness_settings: HarnessSettings, report_sink: ReportSink):
    client = UserApiClient(harness_settings.base_url, sink=report_sink, timeout=harness_settings.api_timeout)
    yield client
    client.close()
