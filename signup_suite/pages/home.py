"""Home page: entry point and logged-in header."""
from __future__ import annotations

from signup_suite.pages.base import ActionError, BasePage


class HomePage(BasePage):
    HOME_LINK = "a[href='/']"
    SIGNUP_LOGIN_LINK = "a[href='/login']"
    LOGGED_IN_AS = "a:has-text('Logged in as')"

    async def navigate(self, base_url: str) -> None:
        try:
            await self.page.goto(base_url)
            await self.page.wait_for_load_state()
        except Exception as exc:
            raise ActionError(name="navigate", payload={"url": base_url}, message=str(exc))

    async def verify_home_page(self) -> bool:
        return await self.is_visible(self.HOME_LINK)

    async def go_to_signup_login(self) -> None:
        await self.click(self.SIGNUP_LOGIN_LINK, wait_for_load=True)

    async def verify_logged_in(self, username: str) -> bool:
        text = await self.text_of(self.LOGGED_IN_AS)
        return text is not None and username in text
