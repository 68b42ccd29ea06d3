"""Tests for API error classification."""

import httpx
import pytest

from diet_web.errors import (
    GENERIC_ERROR_MESSAGE,
    api_error_message,
    is_client_error,
    is_network_error,
    is_server_error,
    status_code_of,
)
from tests.conftest import http_error


@pytest.mark.parametrize(
    ("payload", "expected"),
    [
        ({"error": "Email already registered"}, "Email already registered"),
        ({"message": "Food not found"}, "Food not found"),
        ({"error": "first", "message": "second"}, "first"),
        ({"error": "  ", "message": "second"}, "second"),
        ({"detail": "ignored"}, GENERIC_ERROR_MESSAGE),
    ],
)
def test_api_error_message_prefers_server_text(
    payload: dict[str, object], expected: str
) -> None:
    assert api_error_message(http_error(400, payload)) == expected


def test_api_error_message_for_non_json_body() -> None:
    request = httpx.Request("GET", "http://api.test/api/foods/")
    response = httpx.Response(502, text="Bad Gateway", request=request)
    exc = httpx.HTTPStatusError("bad gateway", request=request, response=response)

    assert api_error_message(exc) == GENERIC_ERROR_MESSAGE


def test_network_error_classification() -> None:
    exc = httpx.ConnectError("refused")

    assert is_network_error(exc)
    assert status_code_of(exc) is None
    assert not is_client_error(exc)
    assert not is_server_error(exc)
    assert api_error_message(exc) == GENERIC_ERROR_MESSAGE


def test_status_classification() -> None:
    assert status_code_of(http_error(404)) == 404
    assert is_client_error(http_error(404))
    assert not is_server_error(http_error(404))
    assert is_server_error(http_error(503))
    assert not is_network_error(http_error(503))
