"""Raw transport results and normalized request responses."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from .consts import get_status_text
from .headers import HeaderCollection, HeaderInput
from .options import RequestOptions


@dataclass(frozen=True)
class RequestResponseInput:
    """
    Raw, not-yet-classified result produced by a transport.

    Attributes:
        status: Status code reported by the transport
        body: Decoded response body, in whatever form the transport chose
        route: The route that was requested
        headers: Response headers, in any header input shape
        url: Full URL actually requested, if the transport knows it
    """

    status: int
    body: Any
    route: str
    headers: Optional[HeaderInput] = None
    url: Optional[str] = None

    @classmethod
    def coerce(cls, value: Union[RequestResponseInput, Mapping[str, Any]]) -> RequestResponseInput:
        """
        Accept either an instance or a plain mapping with the same keys.

        Raises:
            TypeError: If the value is neither
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, Mapping):
            return cls(**value)
        raise TypeError(f"Transport returned an unsupported result: {type(value).__name__}")


@dataclass(frozen=True)
class RequestResponse:
    """
    Normalized response of a completed request.

    Built exactly once per transport result; ``status_text`` and ``success``
    are derived from the status and the request options at construction.

    Attributes:
        status: Status code of the response
        status_text: Symbolic status name, "UNKNOWN" for non-standard codes
        body: Response body
        success: Whether the status is allowed by the request options
        headers: Response headers
        route: The route that was requested
        request: Options the request was made with
        url: Full URL actually requested, if reported by the transport
    """

    status: int
    status_text: str
    body: Any
    success: bool
    headers: HeaderCollection = field(default_factory=lambda: HeaderCollection.empty)
    route: str = ""
    request: RequestOptions = field(default_factory=lambda: RequestOptions.default)
    url: Optional[str] = None

    @classmethod
    def from_input(
        cls,
        response: Union[RequestResponseInput, Mapping[str, Any]],
        request: Optional[RequestOptions] = None,
    ) -> RequestResponse:
        """
        Wrap a raw transport result.

        Args:
            response: The raw result (instance or mapping)
            request: Options used for the request, defaults to the empty baseline

        Returns:
            The normalized response
        """
        raw = RequestResponseInput.coerce(response)
        request = request if request is not None else RequestOptions.default
        return cls(
            status=raw.status,
            status_text=get_status_text(raw.status),
            body=raw.body,
            success=request.is_status_allowed(raw.status),
            headers=HeaderCollection(raw.headers),
            route=raw.route,
            request=request,
            url=raw.url,
        )
