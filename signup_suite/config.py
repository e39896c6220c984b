"""Harness configuration.

Every value is looked up with the same precedence:

1. explicit override (pytest command-line option or keyword argument)
2. process environment (``os.environ``)
3. the project ``.env`` file (see ``signup_suite.env_defaults``)
4. hardcoded default

Settings objects are frozen: they are resolved once per session creation and
never mutated afterwards.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional, Sequence, Tuple, TypedDict
from urllib.parse import urljoin

from signup_suite.env_defaults import get_env_default

DEFAULT_BASE_URL = "https://www.automationexercise.com"
DEFAULT_ENGINE = "chromium"
SUPPORTED_ENGINES = ("chromium", "firefox", "webkit")

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


class ConfigError(ValueError):
    """Raised when a configuration value cannot be parsed."""


class ViewportSize(TypedDict):
    """Viewport width and height in pixels."""
    width: int
    height: int


def lookup(
    keys: Sequence[str],
    overrides: Optional[Mapping[str, Any]] = None,
) -> Tuple[Any, str]:
    """Return ``(value, source)`` for the first of ``keys`` found.

    ``source`` is one of ``override``, ``env``, ``dotenv`` or ``default``
    (value ``None``).
    """
    if overrides:
        for key in keys:
            value = overrides.get(key)
            if value is not None:
                return value, "override"
    for key in keys:
        value = os.environ.get(key)
        if value is not None and value != "":
            return value, "env"
    for key in keys:
        value = get_env_default(key)
        if value is not None and value != "":
            return value, "dotenv"
    return None, "default"


def parse_bool(value: Any, key: str = "value") -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ConfigError(f"{key}: expected a boolean, got {value!r}")


def parse_int(value: Any, key: str = "value") -> int:
    if isinstance(value, bool):
        raise ConfigError(f"{key}: expected an integer, got {value!r}")
    try:
        number = int(str(value).strip())
    except ValueError:
        raise ConfigError(f"{key}: expected an integer, got {value!r}") from None
    if number < 0:
        raise ConfigError(f"{key}: must not be negative, got {number}")
    return number


def parse_float(value: Any, key: str = "value") -> float:
    try:
        return float(str(value).strip())
    except ValueError:
        raise ConfigError(f"{key}: expected a number, got {value!r}") from None


def _resolve(
    keys: Sequence[str],
    overrides: Optional[Mapping[str, Any]],
    parser: Callable[[Any, str], Any],
    default: Any,
) -> Any:
    value, source = lookup(keys, overrides)
    if value is None:
        return default
    try:
        return parser(value, keys[0])
    except ConfigError as exc:
        raise ConfigError(f"{exc} (from {source})") from None


@dataclass(frozen=True)
class BrowserSettings:
    """Options applied when a browser session is created."""

    engine: str = DEFAULT_ENGINE
    headless: bool = True
    slow_mo_ms: Optional[int] = None
    viewport: ViewportSize = field(default_factory=lambda: ViewportSize(width=1920, height=1080))
    ignore_https_errors: bool = True
    default_timeout_ms: int = 30000
    launch_timeout_ms: int = 60000

    @property
    def effective_slow_mo_ms(self) -> int:
        """Slow-motion delay, defaulting to 100 ms for headed runs."""
        if self.slow_mo_ms is not None:
            return self.slow_mo_ms
        return 0 if self.headless else 100

    @property
    def engine_is_supported(self) -> bool:
        return self.engine.lower() in SUPPORTED_ENGINES

    def launch_options(self) -> dict[str, Any]:
        return {
            "headless": self.headless,
            "slow_mo": self.effective_slow_mo_ms,
            "timeout": self.launch_timeout_ms,
        }

    def context_options(self) -> dict[str, Any]:
        return {
            "viewport": dict(self.viewport),
            "ignore_https_errors": self.ignore_https_errors,
        }

    @classmethod
    def resolve(cls, overrides: Optional[Mapping[str, Any]] = None) -> "BrowserSettings":
        """Build settings from overrides, environment, ``.env`` and defaults."""
        engine, _ = lookup(("BROWSER", "browser"), overrides)
        headless = _resolve(("HEADLESS", "headless"), overrides, parse_bool, True)
        slow_mo = _resolve(("SLOW_MO", "slowMo"), overrides, parse_int, None)
        width = _resolve(("VIEWPORT_WIDTH",), overrides, parse_int, 1920)
        height = _resolve(("VIEWPORT_HEIGHT",), overrides, parse_int, 1080)
        return cls(
            engine=str(engine).strip() if engine else DEFAULT_ENGINE,
            headless=headless,
            slow_mo_ms=slow_mo,
            viewport=ViewportSize(width=width, height=height),
            ignore_https_errors=_resolve(("IGNORE_HTTPS_ERRORS",), overrides, parse_bool, True),
            default_timeout_ms=_resolve(("DEFAULT_TIMEOUT_MS",), overrides, parse_int, 30000),
            launch_timeout_ms=_resolve(("LAUNCH_TIMEOUT_MS",), overrides, parse_int, 60000),
        )


@dataclass(frozen=True)
class HarnessSettings:
    """Process-wide, read-only settings for a test run."""

    base_url: str = DEFAULT_BASE_URL
    artifact_dir: Optional[str] = None
    api_timeout: float = 30.0
    browser: BrowserSettings = field(default_factory=BrowserSettings)

    def url(self, path: str = "") -> str:
        """Return an absolute URL for the provided path."""
        return urljoin(self.base_url.rstrip("/") + "/", path.lstrip("/"))

    @classmethod
    def resolve(cls, overrides: Optional[Mapping[str, Any]] = None) -> "HarnessSettings":
        base_url, _ = lookup(("BASE_URL",), overrides)
        artifact_dir, _ = lookup(("ARTIFACT_DIR",), overrides)
        return cls(
            base_url=str(base_url) if base_url else DEFAULT_BASE_URL,
            artifact_dir=str(artifact_dir) if artifact_dir else None,
            api_timeout=_resolve(("API_TIMEOUT",), overrides, parse_float, 30.0),
            browser=BrowserSettings.resolve(overrides),
        )
