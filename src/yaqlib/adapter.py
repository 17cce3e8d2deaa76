"""Request adapter: option merging, deferred execution and response classification."""

from __future__ import annotations

import inspect
import logging
from abc import ABC, abstractmethod
from collections.abc import AsyncIterable, Awaitable, Mapping
from typing import TYPE_CHECKING, Any, Callable, Optional, TypeVar, Union
from urllib.parse import urljoin

from .consts import get_status_text
from .deferred import Deferred
from .errors import NoResponseError, RequestError
from .headers import HeaderCollection
from .options import RequestOptions, RequestOptionsInput
from .response import RequestResponse, RequestResponseInput

if TYPE_CHECKING:
    from .config import AdapterConfig

logger = logging.getLogger(__name__)

ResponseLike = Union[RequestResponseInput, Mapping[str, Any]]

# What a transport may hand back: something to await, a stream whose first
# item is the result, or the result itself.
TransportResult = Union[Awaitable[ResponseLike], AsyncIterable[ResponseLike], ResponseLike]

# A transport as a plain function.
Transport = Callable[[str, RequestOptions], TransportResult]

AdapterT = TypeVar("AdapterT", bound="RequestAdapter")


class RequestAdapter(ABC):
    """
    Base class for adapters which execute requests.

    Subclasses implement ``execute_request`` to perform the actual I/O; the
    adapter itself only merges options, classifies results and caches them.

    Example:
        class StaticAdapter(RequestAdapter):
            async def execute_request(self, route, options):
                return RequestResponseInput(status=200, body="ok", route=route)

        response = await StaticAdapter().request_immediate("anything")
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        defaults: Union[RequestOptionsInput, RequestOptions, None] = None,
    ) -> None:
        """
        Initialize the adapter.

        Args:
            base_url: Base URL routes are resolved against (used by transports)
            defaults: Default options every request is merged onto

        Raises:
            TypeError: If defaults have an unsupported shape
        """
        self.base_url = base_url
        self.defaults = RequestOptions.from_input(defaults)

    @classmethod
    def from_config(cls: type[AdapterT], config: AdapterConfig, **kwargs: Any) -> AdapterT:
        """
        Create an adapter from an AdapterConfig.

        Args:
            config: Validated adapter configuration
            **kwargs: Extra constructor arguments for the concrete adapter

        Returns:
            The configured adapter
        """
        return cls(base_url=config.base_url, defaults=config.defaults.to_options(), **kwargs)

    def resolve_url(self, route: str) -> str:
        """Resolve a route against the base URL, if one is configured."""
        if not self.base_url:
            return route
        return urljoin(self.base_url, route)

    def request(
        self,
        route: str,
        options: Union[RequestOptionsInput, RequestOptions, None] = None,
        **kwargs: Any,
    ) -> Deferred[RequestResponse]:
        """
        Initiate a request using this adapter.

        Options are merged onto the adapter defaults immediately, so invalid
        input raises here. The returned Deferred starts the transport call on
        first await, runs it only once, and shares the outcome with every
        awaiter. Unsuccessful responses raise RequestError for each of them.

        Args:
            route: The route to request
            options: Request options to merge onto the defaults
            **kwargs: Individual request options, applied on top of ``options``

        Returns:
            Deferred resolving to the RequestResponse

        Raises:
            TypeError: If the options or headers have an unsupported shape
        """
        request_options = self.normalize_request_options(options, **kwargs)
        logger.debug(f"Prepared {request_options.method} request for {route}")

        async def execute() -> RequestResponse:
            logger.debug(f"Executing {request_options.method} request for {route}")
            raw = await self._resolve_result(route, self.execute_request(route, request_options))
            response = self.normalize_response(raw, route, request_options)

            if not response.success:
                logger.warning(f"Request for {route} failed: {response.status} {response.status_text}")
                raise RequestError(response)

            logger.debug(f"Request for {route} completed: {response.status} {response.status_text}")
            return response

        return Deferred(execute)

    async def request_immediate(
        self,
        route: str,
        options: Union[RequestOptionsInput, RequestOptions, None] = None,
        **kwargs: Any,
    ) -> RequestResponse:
        """
        Perform a request and wait for its response.

        Convenience for awaiting the result of ``request`` once.

        Raises:
            RequestError: If the response status is not allowed
        """
        return await self.request(route, options, **kwargs)

    def is_status_allowed(self, status: int, options: RequestOptions) -> bool:
        """Whether ``status`` counts as successful under ``options``."""
        return options.is_status_allowed(status)

    def get_status_text(self, status: int) -> str:
        """Status name for ``status``, "UNKNOWN" if it is not a standard code."""
        return get_status_text(status)

    def normalize_request_options(
        self,
        options: Union[RequestOptionsInput, RequestOptions, None] = None,
        **kwargs: Any,
    ) -> RequestOptions:
        """Merge request options onto this adapter's defaults."""
        return self.defaults.extend(options, **kwargs)

    def normalize_response(
        self,
        raw: RequestResponseInput,
        route: str,
        options: RequestOptions,
    ) -> RequestResponse:
        """Wrap a raw transport result into a classified RequestResponse."""
        return RequestResponse(
            status=raw.status,
            status_text=self.get_status_text(raw.status),
            body=raw.body,
            success=self.is_status_allowed(raw.status, options),
            headers=HeaderCollection(raw.headers),
            route=raw.route or route,
            request=options,
            url=raw.url,
        )

    async def _resolve_result(self, route: str, result: TransportResult) -> RequestResponseInput:
        if inspect.isawaitable(result):
            result = await result
        elif isinstance(result, AsyncIterable):
            iterator = result.__aiter__()
            try:
                result = await iterator.__anext__()
            except StopAsyncIteration:
                raise NoResponseError(route) from None
            finally:
                aclose = getattr(iterator, "aclose", None)
                if aclose is not None:
                    await aclose()
        return RequestResponseInput.coerce(result)

    @abstractmethod
    def execute_request(self, route: str, options: RequestOptions) -> TransportResult:
        """
        Actually execute the request.

        Options are already merged, and the result is normalized afterwards.

        Args:
            route: The route to request
            options: The merged options to use

        Returns:
            The raw result, an awaitable of it, or an async iterable whose
            first item is the result
        """


class TransportRequestAdapter(RequestAdapter):
    """
    Adapter delegating execution to a plain transport function.

    Example:
        async def transport(route, options):
            return {"status": 200, "body": "ok", "route": route}

        adapter = TransportRequestAdapter(transport, defaults={"method": "POST"})
    """

    def __init__(
        self,
        transport: Transport,
        base_url: Optional[str] = None,
        defaults: Union[RequestOptionsInput, RequestOptions, None] = None,
    ) -> None:
        super().__init__(base_url=base_url, defaults=defaults)
        self.transport = transport

    def execute_request(self, route: str, options: RequestOptions) -> TransportResult:
        return self.transport(route, options)
