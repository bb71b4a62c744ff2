"""Errors raised by the GoCardless client"""

from typing import Any, Optional

import httpx


class GoCardlessError(Exception):
    """Base exception for the client"""

    pass


class TransportError(GoCardlessError):
    """Request could not be sent or the response could not be received"""

    pass


class ApiError(GoCardlessError):
    """Remote API answered with a non-success status"""

    def __init__(self, status_code: int, body: Any = None, operation: Optional[str] = None):
        self.status_code = status_code
        self.body = body
        self.operation = operation
        super().__init__(self._describe())

    @property
    def summary(self) -> Optional[str]:
        if isinstance(self.body, dict):
            return self.body.get("summary")
        return None

    @property
    def detail(self) -> Optional[str]:
        if isinstance(self.body, dict):
            return self.body.get("detail")
        return None

    def _describe(self) -> str:
        prefix = f"{self.operation}: " if self.operation else ""
        message = f"{prefix}GoCardless API error {self.status_code}"
        if self.summary:
            message += f": {self.summary}"
        if self.detail:
            message += f" ({self.detail})"
        return message

    @classmethod
    def from_response(cls, response: httpx.Response, operation: Optional[str] = None) -> "ApiError":
        """Build the error from a failed response, keeping the body for diagnostics"""
        try:
            body = response.json()
        except ValueError:
            body = response.text or None
        return cls(response.status_code, body, operation)


class AuthenticationError(ApiError):
    """Token endpoint rejected the credentials"""

    pass


class DecodeError(GoCardlessError):
    """Response body does not match the expected shape"""

    pass
