"""Best-effort release of browser resources.

Each step is attempted on its own: a fault in one step is logged and
collected, and the remaining steps still run. A cancellation that lands in
the middle of a step does not skip the steps after it; it is re-raised once
every step has been attempted.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

ReleaseStep = Tuple[str, Callable[[], Awaitable[object]]]


async def release_all(steps: Sequence[ReleaseStep], owner: Optional[str] = None) -> List[BaseException]:
    """Run every release step in order and return the faults it swallowed."""
    suffix = f" for {owner}" if owner else ""
    faults: List[BaseException] = []
    cancelled: Optional[asyncio.CancelledError] = None
    for name, release in steps:
        try:
            await release()
        except asyncio.CancelledError as exc:
            cancelled = exc
            logger.warning(f"Cancelled while releasing {name}{suffix}, releasing the rest first")
        except Exception as exc:
            faults.append(exc)
            logger.warning(f"Error releasing {name}{suffix}: {exc}")
    if cancelled is not None:
        raise cancelled
    return faults
