"""HTTP client for talking with the expense API service."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

import requests

logger = logging.getLogger(__name__)

CONNECTIVITY_MESSAGE = "Unable to reach the expense service. Please check your connection."


class ApiError(Exception):
    """Raised when the service rejects a request or cannot be reached.

    ``status`` is the HTTP status code, or ``None`` for transport failures.
    ``server_message`` holds the message the service supplied, if any.
    """

    def __init__(self, message: str, status: Optional[int] = None, server_message: Optional[str] = None) -> None:
        super().__init__(message)
        self.status = status
        self.server_message = server_message

    @property
    def is_transport_error(self) -> bool:
        return self.status is None


class ExpenseClient:
    def __init__(self, base_url: str, session: Optional[requests.Session] = None, timeout: float = 5) -> None:
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    @property
    def expenses_url(self) -> str:
        return f"{self.base_url}/expenses"

    def list_expenses(self) -> List[Dict[str, Any]]:
        return self._request("GET", self.expenses_url)

    def get_expense(self, expense_id: int) -> Dict[str, Any]:
        return self._request("GET", f"{self.expenses_url}/{expense_id}")

    def create_expense(self, payload: Mapping[str, Any]) -> Dict[str, Any]:
        return self._request("POST", self.expenses_url, json=dict(payload))

    def update_expense(self, expense_id: int, payload: Mapping[str, Any]) -> Dict[str, Any]:
        return self._request("PUT", f"{self.expenses_url}/{expense_id}", json=dict(payload))

    def delete_expense(self, expense_id: int) -> None:
        self._request("DELETE", f"{self.expenses_url}/{expense_id}")

    def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise ApiError(CONNECTIVITY_MESSAGE) from exc

        if not response.ok:
            server_message = _extract_message(response)
            logger.warning("%s %s returned %s: %s", method, url, response.status_code, response.text)
            raise ApiError(
                server_message or f"Request failed with status {response.status_code}",
                status=response.status_code,
                server_message=server_message,
            )

        if response.status_code == 204 or not response.content:
            return None
        return response.json()


def _extract_message(response: requests.Response) -> Optional[str]:
    try:
        body = response.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    message = body.get("message") or body.get("error")
    return message if isinstance(message, str) and message else None
