"""Tests for the aiohttp transport against an in-process server."""

import aiohttp
import pytest
from aiohttp import test_utils, web
from yaqlib import HeaderCollection, RequestError
from yaqlib.transports import AiohttpRequestAdapter


async def echo(request: web.Request) -> web.Response:
    raw = await request.read()
    return web.json_response(
        {
            "method": request.method,
            "accept": request.headers.getall("Accept", []),
            "content_type": request.headers.get("Content-Type"),
            "body": raw.decode() if raw else None,
        }
    )


async def text(request: web.Request) -> web.Response:
    return web.Response(text="hello", headers={"X-Custom": "1"})


async def binary(request: web.Request) -> web.Response:
    return web.Response(body=b"\x00\x01", content_type="application/octet-stream")


async def no_content(request: web.Request) -> web.Response:
    return web.Response(status=204)


async def missing(request: web.Request) -> web.Response:
    return web.Response(status=404, text="nope")


def create_app() -> web.Application:
    app = web.Application()
    app.router.add_route("*", "/api/echo", echo)
    app.router.add_get("/api/text", text)
    app.router.add_get("/api/binary", binary)
    app.router.add_get("/api/empty", no_content)
    app.router.add_get("/api/missing", missing)
    return app


class TestBuildHeaders:
    """Tests for header application order."""

    def test_replace_append_and_remove(self):
        """Test set, append and None-removal semantics."""
        headers = HeaderCollection(
            [
                ("Accept", "text/html"),
                ("accept", "application/json"),
                ("Accept", "text/plain", {"append": True}),
                ("X-Remove", "1"),
                ("x-remove", None),
            ]
        )
        built = AiohttpRequestAdapter.build_headers(headers)

        assert built.getall("Accept") == ["application/json", "text/plain"]
        assert "X-Remove" not in built


class TestAiohttpRequestAdapter:
    """Tests for AiohttpRequestAdapter against a live aiohttp application."""

    @pytest.mark.asyncio
    async def test_text_response(self):
        """Test text bodies are decoded and headers materialized."""
        async with test_utils.TestServer(create_app()) as server:
            async with AiohttpRequestAdapter(base_url=str(server.make_url("/api/"))) as adapter:
                response = await adapter.request_immediate("text")

        assert response.status == 200
        assert response.success is True
        assert response.body == "hello"
        assert response.headers.get("x-custom") == "1"
        assert response.url.endswith("/api/text")
        assert response.route == "text"

    @pytest.mark.asyncio
    async def test_json_body_round_trip(self):
        """Test JSON bodies are encoded and JSON responses parsed."""
        async with test_utils.TestServer(create_app()) as server:
            async with AiohttpRequestAdapter(
                base_url=str(server.make_url("/api/")),
                defaults={"headers": {"Accept": "application/json"}},
            ) as adapter:
                response = await adapter.request_immediate(
                    "echo",
                    method="POST",
                    body={"key": "value"},
                    headers=[("Accept", "text/plain", {"append": True})],
                )

        assert response.body["method"] == "POST"
        assert response.body["accept"] == ["application/json", "text/plain"]
        assert response.body["content_type"].startswith("application/json")
        assert response.body["body"] == '{"key": "value"}'

    @pytest.mark.asyncio
    async def test_raw_string_body(self):
        """Test string bodies are sent as-is with the given content type."""
        async with test_utils.TestServer(create_app()) as server:
            async with AiohttpRequestAdapter(base_url=str(server.make_url("/api/"))) as adapter:
                response = await adapter.request_immediate(
                    "echo", method="PUT", body="plain", content_type="text/plain"
                )

        assert response.body["body"] == "plain"
        assert response.body["content_type"].startswith("text/plain")

    @pytest.mark.asyncio
    async def test_binary_and_empty_bodies(self):
        """Test non-text bodies stay bytes and empty bodies become None."""
        async with test_utils.TestServer(create_app()) as server:
            async with AiohttpRequestAdapter(base_url=str(server.make_url("/api/"))) as adapter:
                binary_response = await adapter.request_immediate("binary")
                empty_response = await adapter.request_immediate("empty")

        assert binary_response.body == b"\x00\x01"
        assert empty_response.status == 204
        assert empty_response.body is None

    @pytest.mark.asyncio
    async def test_unsuccessful_status_raises(self):
        """Test 404 raises RequestError unless allowed."""
        async with test_utils.TestServer(create_app()) as server:
            async with AiohttpRequestAdapter(base_url=str(server.make_url("/api/"))) as adapter:
                with pytest.raises(RequestError) as exc_info:
                    await adapter.request_immediate("missing")
                allowed = await adapter.request_immediate("missing", allowed_statuses=[404])

        assert exc_info.value.response.status == 404
        assert exc_info.value.response.body == "nope"
        assert allowed.success is True

    @pytest.mark.asyncio
    async def test_injected_session_not_closed(self):
        """Test a session passed in is used and left open."""
        async with test_utils.TestServer(create_app()) as server:
            async with aiohttp.ClientSession() as session:
                async with AiohttpRequestAdapter(base_url=str(server.make_url("/api/")), session=session) as adapter:
                    response = await adapter.request_immediate("text")
                assert not session.closed

        assert response.body == "hello"

    @pytest.mark.asyncio
    async def test_requires_session(self):
        """Test requests outside the context fail clearly."""
        adapter = AiohttpRequestAdapter(base_url="http://localhost/")
        with pytest.raises(RuntimeError, match="not initialized"):
            await adapter.request_immediate("text")

    @pytest.mark.asyncio
    async def test_transport_errors_propagate(self):
        """Test connection failures are raised unchanged."""
        async with test_utils.TestServer(create_app()) as server:
            base_url = str(server.make_url("/api/"))

        async with AiohttpRequestAdapter(base_url=base_url) as adapter:
            with pytest.raises(aiohttp.ClientConnectionError):
                await adapter.request_immediate("text")
