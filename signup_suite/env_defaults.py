"""Read defaults from a project-level ``.env`` file.

The file holds plain ``KEY=VALUE`` lines (``#`` comments, optional quotes).
Values found here rank below the process environment and above hardcoded
defaults, so a developer can pin ``BASE_URL`` or ``HEADLESS`` locally without
exporting anything.

Set ``SIGNUP_SUITE_ENV_FILE`` to point at a different file.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Dict


def _env_file_path() -> Path:
    override = os.getenv("SIGNUP_SUITE_ENV_FILE")
    if override:
        return Path(override)
    return Path.cwd() / ".env"


def parse_env_lines(text: str) -> Dict[str, str]:
    defaults: Dict[str, str] = {}
    for raw in text.splitlines():
        line = raw.strip()
        if line.startswith("export "):
            line = line[len("export "):].lstrip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        value = value.strip()
        if len(value) >= 2 and value[0] in ('"', "'") and value[-1] == value[0]:
            value = value[1:-1]
        defaults[key.strip()] = value
    return defaults


@lru_cache(maxsize=1)
def _load_env_defaults() -> Dict[str, str]:
    env_file = _env_file_path()
    if not env_file.exists():
        return {}
    return parse_env_lines(env_file.read_text(encoding="utf-8"))


def get_env_default(key: str) -> str | None:
    return _load_env_defaults().get(key)


def reload_env_defaults() -> None:
    """Forget the cached file contents (tests switch files between runs)."""
    _load_env_defaults.cache_clear()
