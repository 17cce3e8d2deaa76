"""HTTP constants shared by options, responses and transports."""

from enum import Enum
from http import HTTPStatus

UNKNOWN_STATUS_TEXT = "UNKNOWN"


class HTTPMethod(str, Enum):
    """HTTP methods ("verbs") which can qualify a request."""

    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    CONNECT = "CONNECT"
    OPTIONS = "OPTIONS"
    TRACE = "TRACE"
    PATCH = "PATCH"


def get_status_text(status: int) -> str:
    """
    Look up the symbolic name of a status code.

    Args:
        status: HTTP status code

    Returns:
        The status name (e.g. "NOT_FOUND"), or "UNKNOWN" for codes
        outside the standard table
    """
    try:
        return HTTPStatus(status).name
    except ValueError:
        return UNKNOWN_STATUS_TEXT


__all__ = ["HTTPMethod", "HTTPStatus", "UNKNOWN_STATUS_TEXT", "get_status_text"]
