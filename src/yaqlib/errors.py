"""Exceptions raised by the request engine."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .response import RequestResponse


class YaqlibError(Exception):
    """Base class for errors raised by yaqlib itself."""


class RequestError(YaqlibError):
    """
    A request completed, but its status was not allowed by the request options.

    Attributes:
        response: The full response, so callers can inspect status, body
            and headers without re-parsing anything
    """

    def __init__(self, response: RequestResponse) -> None:
        super().__init__(f"Request failed: {response.status} {response.status_text}")
        self.response = response


class NoResponseError(YaqlibError):
    """The transport finished without producing a response."""

    def __init__(self, route: str) -> None:
        super().__init__(f"Transport produced no response for route: {route}")
        self.route = route
