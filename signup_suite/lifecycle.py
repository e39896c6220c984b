"""
Browser session lifecycle.

``SessionLifecycleManager`` builds one Playwright session per execution unit:

    engine (Playwright driver) -> browser -> context -> page

and tears it down again in the reverse order. Usage:

    manager = SessionLifecycleManager()

    async with manager.session(BrowserSettings(headless=False)) as handle:
        await handle.page.goto("https://www.automationexercise.com")

Starting a session for a unit that already has one closes the old session
first. Closing is idempotent and only raises to pass on a cancellation:
teardown faults are logged and returned.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Awaitable, Callable, Hashable, List, Optional

import anyio
from playwright.async_api import Browser, Page, Playwright, async_playwright

from signup_suite.config import DEFAULT_ENGINE, SUPPORTED_ENGINES, BrowserSettings
from signup_suite.release import ReleaseStep, release_all
from signup_suite.sessions import (
    SessionHandle,
    SessionRegistry,
    current_unit,
    describe_unit,
)

logger = logging.getLogger(__name__)

EngineFactory = Callable[[], Awaitable[Playwright]]


async def start_playwright() -> Playwright:
    """Start a fresh Playwright driver."""
    return await async_playwright().start()


def resolve_engine_name(name: Optional[str]) -> str:
    """Map a configured engine name onto a Playwright browser type."""
    candidate = (name or DEFAULT_ENGINE).strip().lower()
    if candidate in SUPPORTED_ENGINES:
        return candidate
    logger.warning(f"Unknown browser engine {name!r}, falling back to {DEFAULT_ENGINE}")
    return DEFAULT_ENGINE


async def _close_page(page: Page) -> None:
    if not page.is_closed():
        await page.close()


async def _close_browser(browser: Browser) -> None:
    if browser.is_connected():
        await browser.close()


class SessionLifecycleManager:
    """
    Creates, tracks and tears down browser sessions keyed by execution unit.

    Args:
        engine_factory: Coroutine function returning a started Playwright
            driver (defaults to ``async_playwright().start()``)
        registry: Registry to store handles in (a private one by default)
    """

    def __init__(
        self,
        engine_factory: Optional[EngineFactory] = None,
        registry: Optional[SessionRegistry] = None,
    ) -> None:
        self._engine_factory: EngineFactory = engine_factory or start_playwright
        self.registry = registry if registry is not None else SessionRegistry()

    async def create_session(
        self,
        settings: Optional[BrowserSettings] = None,
        unit: Optional[Hashable] = None,
    ) -> SessionHandle:
        """
        Build a new session for ``unit`` (the calling unit by default).

        Any session the unit already owns is closed first. If a construction
        step fails, whatever this attempt already built is released and the
        original error is re-raised; nothing is registered.
        """
        unit = current_unit() if unit is None else unit
        owner = describe_unit(unit)

        if self.registry.get(unit) is not None:
            logger.info(f"Replacing existing session for {owner}")
            await self.close_session(unit)

        settings = settings or BrowserSettings.resolve()
        engine_name = resolve_engine_name(settings.engine)

        built: List[ReleaseStep] = []
        try:
            engine = await self._engine_factory()
            built.append(("engine", engine.stop))

            browser_type = getattr(engine, engine_name)
            browser = await browser_type.launch(**settings.launch_options())
            built.append(("browser", browser.close))

            context = await browser.new_context(**settings.context_options())
            built.append(("context", context.close))

            page = await context.new_page()
            built.append(("page", page.close))
            page.set_default_timeout(settings.default_timeout_ms)

            handle = SessionHandle(
                unit=unit,
                engine=engine,
                browser=browser,
                context=context,
                page=page,
                engine_name=engine_name,
            )
            self.registry.put(unit, handle)
        except BaseException:
            logger.warning(f"Session construction failed for {owner}, releasing {len(built)} resource(s)")
            with anyio.CancelScope(shield=True):
                await release_all(list(reversed(built)), owner=owner)
            raise

        logger.info(
            f"Created session for {owner}: engine={engine_name} headless={settings.headless} "
            f"slow_mo={settings.effective_slow_mo_ms}ms"
        )
        return handle

    async def close_session(self, unit: Optional[Hashable] = None) -> List[BaseException]:
        """
        Tear down the unit's session: page, context, browser, engine.

        Safe to call when no session exists. The registry entry is removed
        first, then every step is attempted even if an earlier one fails;
        faults are logged and returned, never raised. A cancellation arriving
        mid-teardown is re-raised only after all four steps have run.
        """
        unit = current_unit() if unit is None else unit
        handle = self.registry.pop(unit)
        if handle is None:
            return []

        owner = describe_unit(unit)
        steps: List[ReleaseStep] = [
            ("page", lambda: _close_page(handle.page)),
            ("context", handle.context.close),
            ("browser", lambda: _close_browser(handle.browser)),
            ("engine", handle.engine.stop),
        ]
        with anyio.CancelScope(shield=True):
            faults = await release_all(steps, owner=owner)

        logger.debug(f"Closed session: {handle} ({len(faults)} teardown fault(s))")
        return faults

    def current_session(self, unit: Optional[Hashable] = None) -> Optional[SessionHandle]:
        """Return the unit's session, or ``None``. Staleness is the caller's concern."""
        unit = current_unit() if unit is None else unit
        return self.registry.get(unit)

    @asynccontextmanager
    async def session(
        self,
        settings: Optional[BrowserSettings] = None,
        unit: Optional[Hashable] = None,
    ) -> AsyncIterator[SessionHandle]:
        """Create a session and close it on exit, including on cancellation."""
        unit = current_unit() if unit is None else unit
        handle = await self.create_session(settings, unit)
        try:
            yield handle
        finally:
            await self.close_session(unit)

    async def close_all(self) -> None:
        """Close every registered session (end-of-run leak guard)."""
        for unit in self.registry.units():
            await self.close_session(unit)

    @property
    def active_sessions(self) -> int:
        """Get number of live sessions."""
        return len(self.registry)
