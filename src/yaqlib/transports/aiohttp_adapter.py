"""Request adapter performing requests over aiohttp."""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Any, Optional, Union

import aiohttp
from multidict import CIMultiDict

from ..adapter import RequestAdapter
from ..headers import HeaderCollection
from ..options import RequestOptions, RequestOptionsInput
from ..response import RequestResponseInput

logger = logging.getLogger(__name__)


class AiohttpRequestAdapter(RequestAdapter):
    """
    RequestAdapter implementation using an aiohttp client session.

    The adapter either owns its session (created in ``async with``) or uses
    one passed in, which it then never closes.

    Example:
        async with AiohttpRequestAdapter(base_url="https://api.example.com/") as adapter:
            response = await adapter.request_immediate("users", headers={"Accept": "application/json"})
            print(response.body)
    """

    RAW_BODY_TYPES = (str, bytes, bytearray, aiohttp.FormData)

    def __init__(
        self,
        base_url: Optional[str] = None,
        defaults: Union[RequestOptionsInput, RequestOptions, None] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        """
        Initialize the adapter.

        Args:
            base_url: Base URL routes are resolved against
            defaults: Default options every request is merged onto
            session: Existing session to use instead of creating one
        """
        super().__init__(base_url=base_url, defaults=defaults)
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self) -> AiohttpRequestAdapter:
        """Enter async context and create the session if needed."""
        if self._session is None:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit async context and close the session if we created it."""
        if self._session is not None and self._owns_session:
            await self._session.close()
            self._session = None

    @staticmethod
    def build_headers(headers: HeaderCollection) -> CIMultiDict[str]:
        """
        Apply header entries in order.

        Appending entries are added alongside earlier values, other entries
        replace them, and entries with a None value remove the header.
        """
        result: CIMultiDict[str] = CIMultiDict()
        for entry in headers:
            if entry.value is None:
                result.popall(entry.name, None)
            elif entry.append:
                result.add(entry.name, entry.value)
            else:
                result[entry.name] = entry.value
        return result

    def build_body(self, body: Any) -> dict[str, Any]:
        """Keyword arguments for ``ClientSession.request`` carrying the body."""
        if body is None:
            return {}
        if isinstance(body, self.RAW_BODY_TYPES):
            return {"data": body}
        return {"json": body}

    async def extract_body(self, response: aiohttp.ClientResponse) -> Any:
        """
        Decode the response body based on its content type.

        Returns:
            None for an empty body, str for text (or no content type), parsed
            JSON for JSON content, and bytes for anything else
        """
        raw = await response.read()
        if not raw:
            return None

        if "Content-Type" not in response.headers or response.content_type.startswith("text/"):
            return await response.text()
        if response.content_type == "application/json" or response.content_type.endswith("+json"):
            return await response.json(content_type=None)
        return raw

    async def execute_request(self, route: str, options: RequestOptions) -> RequestResponseInput:
        """
        Perform the request over the session.

        Raises:
            RuntimeError: If no session is available
            aiohttp.ClientError: On network errors (propagated unchanged)
        """
        if self._session is None:
            raise RuntimeError("Adapter not initialized. Use 'async with' context manager or pass a session.")

        url = self.resolve_url(route)
        try:
            async with self._session.request(
                options.method,
                url,
                headers=self.build_headers(options.headers),
                **self.build_body(options.body),
            ) as response:
                return RequestResponseInput(
                    status=response.status,
                    body=await self.extract_body(response),
                    route=route,
                    headers=response.headers,
                    url=str(response.url),
                )
        except aiohttp.ClientError as e:
            logger.debug(f"Transport error for {options.method} {url}: {e}")
            raise
