"""Failure-triggered diagnostic capture."""
from __future__ import annotations

import logging
from typing import Hashable, Optional

from signup_suite.lifecycle import SessionLifecycleManager
from signup_suite.reporting import Attachment, ReportSink, safe_name
from signup_suite.sessions import describe_unit

logger = logging.getLogger(__name__)


class TestOutcome:
    __test__ = False

    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"


class FailureObserver:
    """
    Takes a full-page screenshot of a failed unit's page.

    Capture is best-effort: a missing session, a closed page or a screenshot
    error is logged and ignored so it never hides the original failure.
    """

    def __init__(self, manager: SessionLifecycleManager, sink: ReportSink) -> None:
        self.manager = manager
        self.sink = sink

    async def on_test_concluded(self, unit: Hashable, outcome: str) -> Optional[Attachment]:
        if outcome != TestOutcome.FAILED:
            return None

        owner = describe_unit(unit)
        handle = self.manager.current_session(unit)
        if handle is None:
            logger.info(f"No session for failed {owner}, skipping screenshot")
            return None

        try:
            if handle.page.is_closed():
                logger.info(f"Page already closed for failed {owner}, skipping screenshot")
                return None
            png = await handle.page.screenshot(full_page=True)
        except Exception as exc:
            logger.warning(f"Failure screenshot for {owner} failed: {exc}")
            return None

        attachment = self.sink.attach_bytes(f"screenshot-{safe_name(owner)}", png)
        logger.info(f"Captured failure screenshot for {owner}")
        return attachment
