"""Shared page-object plumbing over a Playwright page."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List

from playwright.async_api import Page


@dataclass
class ActionError(Exception):
    """Raised when a page action fails."""

    name: str
    payload: Dict[str, Any]
    message: str

    def __str__(self) -> str:
        return f"{self.name} failed ({self.message}) with payload={self.payload}"


class BasePage:
    """Actions raise ``ActionError``; ``is_visible``-style checks return ``False`` instead."""

    def __init__(self, page: Page) -> None:
        self.page = page

    @property
    def url(self) -> str:
        return self.page.url

    async def wait_for_load(self) -> None:
        await self.page.wait_for_load_state()

    async def is_visible(self, selector: str) -> bool:
        try:
            return await self.page.locator(selector).first.is_visible()
        except Exception:
            return False

    async def text_of(self, selector: str, timeout: int = 5000) -> str | None:
        try:
            return await self.page.locator(selector).first.text_content(timeout=timeout)
        except Exception:
            return None

    async def fill(self, selector: str, value: str) -> None:
        try:
            await self.page.locator(selector).fill(value)
        except Exception as exc:
            raise ActionError(name="fill", payload={"selector": selector, "value": value}, message=str(exc))

    async def click(self, selector: str, wait_for_load: bool = False) -> None:
        try:
            await self.page.locator(selector).first.click()
            if wait_for_load:
                await self.page.wait_for_load_state()
        except Exception as exc:
            raise ActionError(name="click", payload={"selector": selector}, message=str(exc))

    async def set_checked(self, selector: str, checked: bool = True) -> None:
        try:
            await self.page.locator(selector).set_checked(checked)
        except Exception as exc:
            raise ActionError(name="set_checked", payload={"selector": selector, "checked": checked}, message=str(exc))

    async def select(self, selector: str, value: str | List[str]) -> None:
        try:
            values = [value] if isinstance(value, str) else value
            await self.page.locator(selector).select_option(values)
        except Exception as exc:
            raise ActionError(name="select", payload={"selector": selector, "value": value}, message=str(exc))
