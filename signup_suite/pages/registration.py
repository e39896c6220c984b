"""Signup flow: "New User Signup!" form, account details, confirmation."""
from __future__ import annotations

from typing import Any, Dict

from signup_suite.pages.base import BasePage

DEFAULT_ACCOUNT_DETAILS: Dict[str, Any] = {
    "title": "Mr",
    "birth_day": "10",
    "birth_month": "5",
    "birth_year": "1994",
    "newsletter": True,
    "optin": True,
    "first_name": "Test",
    "last_name": "User",
    "company": "DemoCo",
    "address1": "123 Test St",
    "address2": "",
    "country": "Canada",
    "state": "ON",
    "city": "Toronto",
    "zipcode": "A1A1A1",
    "mobile_number": "+1234567890",
}

_TEXT_FIELDS = {
    "first_name": "#first_name",
    "last_name": "#last_name",
    "company": "#company",
    "address1": "#address1",
    "address2": "#address2",
    "state": "#state",
    "city": "#city",
    "zipcode": "#zipcode",
    "mobile_number": "#mobile_number",
}


class RegistrationPage(BasePage):
    SIGNUP_HEADING = "text=New User Signup!"
    SIGNUP_NAME = "input[data-qa='signup-name']"
    SIGNUP_EMAIL = "input[data-qa='signup-email']"
    SIGNUP_BUTTON = "button[data-qa='signup-button']"
    ACCOUNT_INFO_HEADING = "text=Enter Account Information"
    CREATE_ACCOUNT = "button[data-qa='create-account']"
    ACCOUNT_CREATED = "h2[data-qa='account-created']"
    DUPLICATE_EMAIL = "text=Email Address already exist!"
    CONTINUE = "a[data-qa='continue-button']"
    DELETE_ACCOUNT = "a[href='/delete_account']"
    ACCOUNT_DELETED = "h2[data-qa='account-deleted']"

    CREATED_PATH = "/account_created"

    async def verify_new_user_signup(self) -> bool:
        return await self.is_visible(self.SIGNUP_HEADING)

    async def start_signup(self, name: str, email: str) -> None:
        await self.fill(self.SIGNUP_NAME, name)
        await self.fill(self.SIGNUP_EMAIL, email)
        await self.click(self.SIGNUP_BUTTON, wait_for_load=True)

    async def verify_account_information_page(self) -> bool:
        return await self.is_visible(self.ACCOUNT_INFO_HEADING)

    async def fill_account_details(self, password: str) -> None:
        """Fill the account form with fixed defaults and the given password."""
        await self.fill_account_details_from_data({**DEFAULT_ACCOUNT_DETAILS, "password": password})

    async def fill_account_details_from_data(self, data: Dict[str, Any]) -> None:
        """Fill the account form from a data row; missing keys use the defaults."""
        details = {**DEFAULT_ACCOUNT_DETAILS, **data}

        title_selector = "#id_gender2" if str(details["title"]).lower() in {"mrs", "ms"} else "#id_gender1"
        await self.set_checked(title_selector)
        await self.fill("#password", str(details["password"]))
        await self.select("#days", str(details["birth_day"]))
        await self.select("#months", str(details["birth_month"]))
        await self.select("#years", str(details["birth_year"]))
        await self.set_checked("#newsletter", bool(details["newsletter"]))
        await self.set_checked("#optin", bool(details["optin"]))
        for key, selector in _TEXT_FIELDS.items():
            value = details.get(key)
            if value:
                await self.fill(selector, str(value))
        await self.select("#country", str(details["country"]))

    async def submit_account(self) -> None:
        await self.click(self.CREATE_ACCOUNT, wait_for_load=True)

    async def is_account_created(self) -> bool:
        """Account creation detected from the URL, falling back to the confirmation heading."""
        if self.CREATED_PATH in self.url:
            return True
        return await self.is_visible(self.ACCOUNT_CREATED) or await self.is_visible("text=Account Created!")

    async def is_duplicate_email_error(self) -> bool:
        return await self.is_visible(self.DUPLICATE_EMAIL)

    async def continue_after_creation(self) -> None:
        await self.click(self.CONTINUE, wait_for_load=True)

    async def delete_account(self) -> bool:
        await self.click(self.DELETE_ACCOUNT, wait_for_load=True)
        return "/delete_account" in self.url or await self.is_visible(self.ACCOUNT_DELETED)
