"""Assertions with failure messages that say what probably went wrong."""
from __future__ import annotations

import logging
from typing import Optional

from signup_suite.api_client import ApiResponse

logger = logging.getLogger(__name__)


def assert_visible(is_visible: bool, element_name: str) -> None:
    assert is_visible, (
        f"Expected '{element_name}' to be visible on the page, but it was not found. "
        f"This may indicate a page loading issue or incorrect navigation."
    )


def assert_not_visible(is_visible: bool, element_name: str) -> None:
    assert not is_visible, (
        f"Expected '{element_name}' to NOT be visible on the page, but it was found. "
        f"This may indicate a state issue or failed action."
    )


def assert_text_contains(actual: Optional[str], expected: str, context: str) -> None:
    assert actual is not None and expected in actual, (
        f"In {context}: expected text to contain '{expected}', but actual text was "
        f"'{actual if actual is not None else 'None'}'."
    )


def assert_text_equals(actual: Optional[str], expected: str, context: str) -> None:
    assert actual == expected, f"In {context}: expected text to be '{expected}', but was '{actual}'."


def assert_condition(condition: bool, failure_message: str, success_message: str = "") -> None:
    assert condition, failure_message
    if success_message:
        logger.info(success_message)


def assert_status_code(actual: int, expected: int, endpoint: str) -> None:
    assert actual == expected, (
        f"API endpoint '{endpoint}' returned unexpected status code. "
        f"Expected: {expected}, Actual: {actual}."
    )


def assert_response_code(response: ApiResponse, expected: int) -> None:
    """Check the ``responseCode`` the API embeds in its JSON body."""
    assert response.response_code == expected, (
        f"API endpoint '{response.endpoint}' answered responseCode={response.response_code} "
        f"(expected {expected}). Body: {response.text[:500]}"
    )


def assert_response_contains(response: ApiResponse, fragment: str) -> None:
    assert response.contains(fragment), (
        f"API endpoint '{response.endpoint}' response does not contain '{fragment}'. "
        f"Response: {response.text[:500]}"
    )


def assert_login_state(is_logged_in: bool, username: str, should_be_logged_in: bool) -> None:
    if should_be_logged_in:
        assert is_logged_in, (
            f"Expected user '{username}' to be logged in, but login was not successful. "
            f"Check credentials, API response, or UI state."
        )
    else:
        assert not is_logged_in, (
            f"Expected user '{username}' to NOT be logged in, but user appears logged in. "
            f"Check logout functionality or session state."
        )


def assert_registration_state(is_registered: bool, username: str, should_succeed: bool) -> None:
    if should_succeed:
        assert is_registered, (
            f"Expected registration for user '{username}' to succeed, but it failed. "
            f"Check for duplicate email, validation errors, or API issues."
        )
    else:
        assert not is_registered, (
            f"Expected registration for user '{username}' to fail, but it succeeded. "
            f"Check validation rules or error handling."
        )


def soft_assert(condition: bool, message: str) -> bool:
    """Log instead of failing; returns the condition."""
    if not condition:
        logger.warning(f"SOFT ASSERTION FAILED: {message}")
    return condition
