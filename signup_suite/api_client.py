"""Client for the application's user form API.

The endpoints take ``application/x-www-form-urlencoded`` posts and answer
HTTP 200 with a JSON body carrying the real result:

    {"responseCode": 201, "message": "User created!"}

Every response is attached to the report sink as text for debugging.

Usage:
    client = UserApiClient("https://www.automationexercise.com")
    response = client.register("Test User", "user@example.test", "Passw0rd!")
    assert response.response_code == 201
"""
from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from signup_suite.reporting import ReportSink

logger = logging.getLogger(__name__)

REGISTER_DEFAULTS: Dict[str, str] = {
    "title": "Mr",
    "birth_date": "1",
    "birth_month": "1",
    "birth_year": "1990",
    "company": "TestCompany",
    "address1": "123 Test Street",
    "address2": "Apt 1",
    "country": "United States",
    "zipcode": "12345",
    "state": "California",
    "city": "Los Angeles",
    "mobile_number": "1234567890",
}


@dataclass
class ApiResponse:
    """HTTP response plus the ``responseCode``/``message`` the API embeds in its body."""

    endpoint: str
    status_code: int
    text: str
    elapsed_ms: float
    payload: Optional[Dict[str, Any]] = None

    @property
    def response_code(self) -> Optional[int]:
        if self.payload is None:
            return None
        code = self.payload.get("responseCode")
        return int(code) if isinstance(code, (int, str)) and str(code).isdigit() else None

    @property
    def message(self) -> str:
        if self.payload is None:
            return ""
        return str(self.payload.get("message", ""))

    def contains(self, fragment: str) -> bool:
        """Case-insensitive substring check on the raw body."""
        return fragment.lower() in self.text.lower()

    def pretty(self) -> str:
        if self.payload is not None:
            return json.dumps(self.payload, indent=2, ensure_ascii=False)
        return self.text

    @classmethod
    def from_httpx(cls, endpoint: str, response: httpx.Response, elapsed_ms: float) -> ApiResponse:
        payload: Optional[Dict[str, Any]] = None
        try:
            parsed = response.json()
            if isinstance(parsed, dict):
                payload = parsed
        except ValueError:
            payload = None
        return cls(
            endpoint=endpoint,
            status_code=response.status_code,
            text=response.text,
            elapsed_ms=elapsed_ms,
            payload=payload,
        )


def split_name(name: str) -> tuple[str, str]:
    """First name and last name; the last name falls back to ``User``."""
    parts = name.split(" ", 1)
    first = parts[0] if parts[0] else name
    last = parts[1] if len(parts) > 1 and parts[1] else "User"
    return first, last


class UserApiClient:
    """Synchronous client for the user registration/login endpoints.

    Args:
        base_url: Application base URL
        sink: Report sink receiving each response as a text attachment
        timeout: Request timeout in seconds
        transport: Optional httpx transport (tests use ``httpx.MockTransport``)
    """

    def __init__(
        self,
        base_url: str,
        sink: Optional[ReportSink] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.sink = sink
        self._client = httpx.Client(base_url=self.base_url, timeout=timeout, transport=transport)

    def __enter__(self) -> UserApiClient:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def _send(self, method: str, endpoint: str, data: Dict[str, str]) -> ApiResponse:
        logger.debug(f"{method} {self.base_url}{endpoint} fields={sorted(data)}")
        started = time.perf_counter()
        response = self._client.request(method, endpoint, data=data)
        elapsed_ms = (time.perf_counter() - started) * 1000
        result = ApiResponse.from_httpx(endpoint, response, elapsed_ms)
        self._attach(result)
        return result

    def _attach(self, result: ApiResponse) -> None:
        if self.sink is None:
            return
        extension = "json" if result.payload is not None else "txt"
        self.sink.attach_text(f"api-response{result.endpoint.replace('/', '-')}", result.pretty(), extension)

    def register(self, name: str, email: str, password: str, **overrides: str) -> ApiResponse:
        """Create an account via ``/api/createAccount``."""
        first, last = split_name(name)
        data = {
            "name": name,
            "email": email,
            "password": password,
            "firstname": first,
            "lastname": last,
            **REGISTER_DEFAULTS,
        }
        data.update(overrides)
        return self._send("POST", "/api/createAccount", data)

    def login(self, email: str, password: str) -> ApiResponse:
        """Check credentials via ``/api/verifyLogin``."""
        return self._send("POST", "/api/verifyLogin", {"email": email, "password": password})

    def delete_account(self, email: str, password: str) -> ApiResponse:
        """Remove an account via ``/api/deleteAccount``."""
        return self._send("DELETE", "/api/deleteAccount", {"email": email, "password": password})
