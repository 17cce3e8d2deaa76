"""Shared fixtures: an in-memory adapter with a fixed route table."""

import pytest
from yaqlib import HTTPStatus, RequestAdapter, RequestOptions, RequestResponseInput

ROUTE_OK = "ok"
ROUTE_NOT_FOUND = "not-found"
ROUTE_UNKNOWN = "unknown"


class RouteTableAdapter(RequestAdapter):
    """Adapter answering from a fixed route table and counting transport calls."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.calls = []

    async def execute_request(self, route: str, options: RequestOptions) -> RequestResponseInput:
        self.calls.append((route, options))
        url = self.resolve_url(route)

        if route == ROUTE_OK:
            return RequestResponseInput(
                status=HTTPStatus.CREATED,
                body=options.body if options.body is not None else "ok",
                route=route,
                headers=[(entry.name, entry.value) for entry in options.headers],
                url=url,
            )
        if route == ROUTE_NOT_FOUND:
            return RequestResponseInput(status=HTTPStatus.NOT_FOUND, body="not found", route=route, url=url)
        if route == ROUTE_UNKNOWN:
            return RequestResponseInput(status=999, body="unknown", route=route, url=url)
        return RequestResponseInput(
            status=HTTPStatus.INTERNAL_SERVER_ERROR,
            body="default",
            route=route,
            url=url,
        )


@pytest.fixture
def adapter():
    """Route table adapter without defaults."""
    return RouteTableAdapter()


@pytest.fixture
def make_adapter():
    """Factory for route table adapters with custom base URL or defaults."""
    return RouteTableAdapter
