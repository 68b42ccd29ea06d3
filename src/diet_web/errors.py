"""Error classification and user-facing messages for API failures."""

import httpx

GENERIC_ERROR_MESSAGE = "Something went wrong on the server. Please try again."


def api_error_message(exc: BaseException) -> str:
    """Return a displayable message for a failed API call.

    The remote API reports failures as JSON with an ``error`` or ``message``
    string; those win in that order. Anything else gets the generic message.
    """
    payload = _response_payload(exc)
    for key in ("error", "message"):
        value = payload.get(key)
        if isinstance(value, str) and value.strip():
            return value
    return GENERIC_ERROR_MESSAGE


def status_code_of(exc: BaseException) -> int | None:
    """Return the HTTP status code carried by an exception, if any."""
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return status_code
    return None


def is_network_error(exc: BaseException) -> bool:
    """Whether the request never produced a response."""
    return isinstance(exc, httpx.RequestError)


def is_client_error(exc: BaseException) -> bool:
    """Whether the server rejected the request with a 4xx status."""
    status_code = status_code_of(exc)
    return status_code is not None and 400 <= status_code < 500  # noqa: PLR2004


def is_server_error(exc: BaseException) -> bool:
    """Whether the server failed with a 5xx status."""
    status_code = status_code_of(exc)
    return status_code is not None and status_code >= 500  # noqa: PLR2004


def _response_payload(exc: BaseException) -> dict[str, object]:
    if not isinstance(exc, httpx.HTTPStatusError):
        return {}
    try:
        payload = exc.response.json()
    except ValueError:
        return {}
    return payload if isinstance(payload, dict) else {}
