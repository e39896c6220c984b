"""
Session handles and the per-unit session registry.

An *execution unit* is one concurrently running test invocation. Each unit
owns at most one ``SessionHandle`` and only ever touches the registry slot
keyed by its own identity.
"""
from __future__ import annotations

import asyncio
import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Hashable, Iterator, List, Optional

from playwright.async_api import Browser, BrowserContext, Page, Playwright

logger = logging.getLogger(__name__)


class SessionError(RuntimeError):
    """Raised when the registry's one-handle-per-unit rule would be broken."""


def current_unit() -> Hashable:
    """Identity of the calling execution unit.

    The running ``asyncio.Task`` inside an event loop, otherwise the current
    thread.
    """
    try:
        task = asyncio.current_task()
    except RuntimeError:
        task = None
    if task is not None:
        return task
    return threading.current_thread()


def describe_unit(unit: Hashable) -> str:
    if isinstance(unit, asyncio.Task):
        return f"task:{unit.get_name()}"
    if isinstance(unit, threading.Thread):
        return f"thread:{unit.name}"
    return str(unit)


@dataclass
class SessionHandle:
    """One isolated browser automation session.

    ``page`` belongs to ``context``, which belongs to ``browser``, which was
    launched from ``engine``.
    """
    unit: Hashable
    engine: Playwright
    browser: Browser
    context: BrowserContext
    page: Page
    engine_name: str = "chromium"
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_closed(self) -> bool:
        """True once the page reports itself closed."""
        try:
            return self.page.is_closed()
        except Exception:
            return True

    def __repr__(self) -> str:
        return (
            f"SessionHandle(unit={describe_unit(self.unit)}, engine={self.engine_name}, "
            f"created={self.created_at.isoformat()})"
        )


class SessionRegistry:
    """
    Mapping of execution unit -> live ``SessionHandle``.

    Access is serialized with a lock so units running on different threads can
    share one registry. Entries are removed on teardown, never set to ``None``,
    so ``len()`` and iteration only see live sessions.
    """

    def __init__(self) -> None:
        self._sessions: Dict[Hashable, SessionHandle] = {}
        self._lock = threading.Lock()

    def get(self, unit: Hashable) -> Optional[SessionHandle]:
        with self._lock:
            return self._sessions.get(unit)

    def put(self, unit: Hashable, handle: SessionHandle) -> None:
        with self._lock:
            if unit in self._sessions:
                raise SessionError(f"Unit {describe_unit(unit)} already owns a session")
            self._sessions[unit] = handle
        logger.debug(f"Registered session: {handle}")

    def pop(self, unit: Hashable) -> Optional[SessionHandle]:
        with self._lock:
            handle = self._sessions.pop(unit, None)
        if handle is not None:
            logger.debug(f"Unregistered session: {handle}")
        return handle

    def units(self) -> List[Hashable]:
        with self._lock:
            return list(self._sessions.keys())

    def __contains__(self, unit: object) -> bool:
        with self._lock:
            return unit in self._sessions

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def __iter__(self) -> Iterator[SessionHandle]:
        with self._lock:
            handles = list(self._sessions.values())
        return iter(handles)
