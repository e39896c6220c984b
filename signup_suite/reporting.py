"""Report sink for run artifacts (failure screenshots, API response dumps)."""
from __future__ import annotations

import logging
import re
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

logger = logging.getLogger(__name__)

_UNSAFE = re.compile(r"[^A-Za-z0-9._-]+")


def safe_name(name: str, max_length: int = 120) -> str:
    """Turn a test id or label into a file-system friendly name."""
    cleaned = _UNSAFE.sub("_", name).strip("._")
    return (cleaned or "attachment")[:max_length]


@dataclass
class Attachment:
    name: str
    content: bytes
    extension: str
    media_type: str
    path: Optional[Path] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")


class ReportSink:
    """
    Append-only collection of named attachments.

    Attachments are kept in memory and, when ``directory`` is set, also written
    there as ``<index>-<name>.<extension>``. Safe to use from several threads.
    """

    def __init__(self, directory: Optional[str | Path] = None) -> None:
        self.directory = Path(directory) if directory else None
        self._attachments: List[Attachment] = []
        self._lock = threading.Lock()

    def attach_bytes(
        self,
        name: str,
        content: bytes,
        extension: str = "png",
        media_type: str = "image/png",
    ) -> Attachment:
        attachment = Attachment(name=name, content=content, extension=extension, media_type=media_type)
        with self._lock:
            self._attachments.append(attachment)
            index = len(self._attachments)
            if self.directory is not None:
                self.directory.mkdir(parents=True, exist_ok=True)
                path = self.directory / f"{index:04d}-{safe_name(name)}.{extension}"
                path.write_bytes(content)
                attachment.path = path
        logger.debug(f"Attached {name} ({len(content)} bytes)")
        return attachment

    def attach_text(self, name: str, text: str, extension: str = "txt") -> Attachment:
        media_type = "application/json" if extension == "json" else "text/plain"
        return self.attach_bytes(name, text.encode("utf-8"), extension=extension, media_type=media_type)

    @property
    def attachments(self) -> List[Attachment]:
        with self._lock:
            return list(self._attachments)

    def named(self, prefix: str) -> List[Attachment]:
        return [a for a in self.attachments if a.name.startswith(prefix)]

    def __len__(self) -> int:
        with self._lock:
            return len(self._attachments)
