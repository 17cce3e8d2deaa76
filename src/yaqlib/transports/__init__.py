"""Concrete transports for yaqlib."""

from .aiohttp_adapter import AiohttpRequestAdapter

__all__ = ["AiohttpRequestAdapter"]
