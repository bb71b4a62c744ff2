"""Unit tests for API error construction"""

import httpx
import pytest

from gocardless_client.domain.exceptions import (
    ApiError,
    AuthenticationError,
    DecodeError,
    GoCardlessError,
    TransportError,
)


def _response(status_code: int, **kwargs) -> httpx.Response:
    request = httpx.Request("GET", "https://bankaccountdata.gocardless.com/api/v2/requisitions/")
    return httpx.Response(status_code, request=request, **kwargs)


def test_api_error_from_json_body():
    """Test summary and detail are lifted from the remote error body"""
    error = ApiError.from_response(
        _response(401, json={"summary": "Invalid token", "detail": "Token is invalid or expired", "status_code": 401}),
        "list_requisitions",
    )

    assert error.status_code == 401
    assert error.summary == "Invalid token"
    assert error.detail == "Token is invalid or expired"
    assert error.body["status_code"] == 401
    assert str(error) == "list_requisitions: GoCardless API error 401: Invalid token (Token is invalid or expired)"


def test_api_error_from_text_body():
    """Test a non-JSON error body is kept as text"""
    error = ApiError.from_response(_response(502, text="Bad Gateway"))

    assert error.status_code == 502
    assert error.body == "Bad Gateway"
    assert error.summary is None
    assert str(error) == "GoCardless API error 502"


def test_api_error_from_empty_body():
    error = ApiError.from_response(_response(500))
    assert error.body is None


def test_authentication_error_is_api_error():
    error = AuthenticationError.from_response(_response(401, json={"summary": "Authentication failed"}), "create_token")

    assert isinstance(error, AuthenticationError)
    assert isinstance(error, ApiError)
    assert error.summary == "Authentication failed"


@pytest.mark.parametrize("error_type", [TransportError, ApiError, DecodeError])
def test_error_kinds_share_base(error_type):
    """Test every error kind is catchable as GoCardlessError"""
    assert issubclass(error_type, GoCardlessError)


def test_error_kinds_are_distinct():
    assert not issubclass(ApiError, TransportError)
    assert not issubclass(TransportError, ApiError)
    assert not issubclass(DecodeError, ApiError)
