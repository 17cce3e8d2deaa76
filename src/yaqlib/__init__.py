"""
yaqlib - transport-agnostic HTTP request engine.

Usage:
    from yaqlib import RequestError
    from yaqlib.transports import AiohttpRequestAdapter

    async with AiohttpRequestAdapter(base_url="https://api.example.com/") as adapter:
        try:
            response = await adapter.request_immediate("users", allowed_statuses=[404])
        except RequestError as err:
            print(err.response.status, err.response.body)
"""

__version__ = "1.0.0"

from .adapter import RequestAdapter, Transport, TransportRequestAdapter, TransportResult
from .client import RequestClient
from .config import AdapterConfig, RequestDefaults
from .consts import HTTPMethod, HTTPStatus, get_status_text
from .deferred import Deferred
from .errors import NoResponseError, RequestError, YaqlibError
from .headers import UNSET, HeaderCollection, HeaderEntry, HeaderInput, HeaderOptions, group_headers
from .logging_config import setup_logging
from .options import (
    RequestOptions,
    RequestOptionsInput,
    StatusPredicate,
    allow_2xx_statuses,
    allow_4xx_statuses,
    allow_any_status,
)
from .response import RequestResponse, RequestResponseInput

__all__ = [
    "__version__",
    # Adapters
    "RequestAdapter",
    "TransportRequestAdapter",
    "Transport",
    "TransportResult",
    "RequestClient",
    "Deferred",
    # Config
    "AdapterConfig",
    "RequestDefaults",
    "setup_logging",
    # Headers
    "HeaderCollection",
    "HeaderEntry",
    "HeaderInput",
    "HeaderOptions",
    "UNSET",
    "group_headers",
    # Options
    "RequestOptions",
    "RequestOptionsInput",
    "StatusPredicate",
    "allow_2xx_statuses",
    "allow_4xx_statuses",
    "allow_any_status",
    # Responses
    "RequestResponse",
    "RequestResponseInput",
    "HTTPMethod",
    "HTTPStatus",
    "get_status_text",
    # Errors
    "YaqlibError",
    "RequestError",
    "NoResponseError",
]
