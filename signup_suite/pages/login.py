"""Login form on the signup/login page."""
from __future__ import annotations

from signup_suite.pages.base import BasePage


class LoginPage(BasePage):
    HEADING = "text=Login to your account"
    EMAIL = "input[data-qa='login-email']"
    PASSWORD = "input[data-qa='login-password']"
    SUBMIT = "button[data-qa='login-button']"
    LOGOUT = "a:has-text('Logout')"
    ERROR = "p:has-text('Your email or password is incorrect!')"

    async def verify_login_page(self) -> bool:
        return await self.is_visible(self.HEADING)

    async def fill_email(self, email: str) -> None:
        await self.fill(self.EMAIL, email)

    async def fill_password(self, password: str) -> None:
        await self.fill(self.PASSWORD, password)

    async def submit_login(self) -> None:
        await self.click(self.SUBMIT, wait_for_load=True)

    async def login(self, email: str, password: str) -> None:
        await self.fill_email(email)
        await self.fill_password(password)
        await self.submit_login()

    async def is_logged_in(self) -> bool:
        return await self.is_visible(self.LOGOUT)

    async def verify_login_success(self, username: str) -> bool:
        expected = f"Logged in as {username}"
        text = await self.text_of(f"text={expected}")
        return text is not None and expected in text

    async def verify_login_failure(self) -> bool:
        return await self.is_visible("text=Your email or password is")

    async def error_text(self) -> str:
        text = await self.text_of(self.ERROR)
        return text if text is not None else "Error message not found"

    async def logout(self) -> None:
        await self.click(self.LOGOUT, wait_for_load=True)
