"""Request client: route helpers composed over a request adapter."""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Callable, Optional, Union

from .adapter import RequestAdapter
from .deferred import Deferred
from .options import RequestOptions, RequestOptionsInput
from .response import RequestResponse

# Maps a response body (and the full response) to the body callers receive.
BodyMapper = Callable[[Any, RequestResponse], Any]

RequestBuilder = Callable[..., Union[RequestOptionsInput, RequestOptions, None]]


class RequestClient:
    """
    Client used to execute requests through an adapter.

    May be used by itself, but is most useful subclassed, with one route
    helper per endpoint.

    Example:
        class UsersClient(RequestClient):
            def __init__(self, adapter):
                super().__init__(adapter)
                self.get_user = self.define_route(
                    "users",
                    request=lambda user_id: {"headers": {"X-User": user_id}},
                    result=lambda body, response: body["user"],
                )

        user = (await client.get_user(42)).body
    """

    def __init__(self, adapter: RequestAdapter) -> None:
        self.adapter = adapter

    def request(
        self,
        route: str,
        options: Union[RequestOptionsInput, RequestOptions, None] = None,
        *,
        map_body: Optional[BodyMapper] = None,
        adapter: Optional[RequestAdapter] = None,
    ) -> Deferred[RequestResponse]:
        """
        Initiate a request with the client's adapter (or ``adapter`` if given).

        Args:
            route: The route to request
            options: Options for the request
            map_body: Optional function replacing the response body
            adapter: Adapter to use instead of the client's

        Returns:
            Deferred resolving to the (mapped) response
        """
        deferred = (adapter or self.adapter).request(route, options)
        if map_body is None:
            return deferred
        return deferred.map(lambda response: replace(response, body=map_body(response.body, response)))

    def define_route(
        self,
        route: str,
        *,
        request: Optional[RequestBuilder] = None,
        result: Optional[BodyMapper] = None,
        adapter: Optional[RequestAdapter] = None,
    ) -> Callable[..., Deferred[RequestResponse]]:
        """
        Define a function which requests ``route`` when called.

        Arguments of the returned function are passed to ``request`` to build
        the request options; the response body is passed through ``result``.

        Args:
            route: The route to request
            request: Builds request options from the call arguments
            result: Maps the response body
            adapter: Adapter to use instead of the client's

        Returns:
            Function initiating the request and returning its Deferred
        """

        def call(*args: Any, **kwargs: Any) -> Deferred[RequestResponse]:
            options = request(*args, **kwargs) if request is not None else None
            return self.request(route, options, map_body=result, adapter=adapter)

        return call
