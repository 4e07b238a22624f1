"""
Base API Client - Shared request handling for the directory service clients.
All API services should inherit from this or use its _core_async_request method.

The HTTP transport is a collaborator: anything with an async
``fetch(url) -> (body, status)`` works, so tests can swap in a fake.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Protocol

import aiohttp
from yarl import URL

from utils.get_logger import get_logger

DEFAULT_USER_AGENT = "itunes-podcasts/1.0"


class HTTPTransport(Protocol):
    """Protocol for transports (aiohttp-backed or fake)."""

    async def fetch(self, url: str) -> tuple[bytes, int]: ...


class AiohttpTransport:
    """
    Transport backed by an aiohttp ClientSession.

    The session is created lazily and closed by ``close()`` unless it was
    supplied by the caller.
    """

    def __init__(
        self,
        session: aiohttp.ClientSession | None = None,
        timeout_seconds: float = 30,
        user_agent: str = DEFAULT_USER_AGENT,
    ):
        self._external_session = session is not None
        self._session = session
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self._user_agent = user_agent

    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=self._timeout,
                headers={"User-Agent": self._user_agent, "Accept": "application/json"},
            )
            self._external_session = False
        return self._session

    async def fetch(self, url: str) -> tuple[bytes, int]:
        """GET ``url`` and return the raw body with the HTTP status.

        The URL is sent exactly as given (already encoded).
        """
        session = await self._ensure_session()
        async with session.get(URL(url, encoded=True)) as response:
            body = await response.read()
            return body, response.status

    async def close(self) -> None:
        if self._session and not self._external_session:
            await self._session.close()
        self._session = None

    async def __aenter__(self) -> AiohttpTransport:
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()


def raise_if_cancelled() -> None:
    """Raise CancelledError if the running task already has a cancellation pending."""
    try:
        task = asyncio.current_task()
    except RuntimeError:
        return
    if task is not None and task.cancelling():
        raise asyncio.CancelledError()


class BaseAPIClient:
    """
    Base class for API clients with shared request handling.
    Provides transport ownership, cancellation checks and request logging.
    No retries and no caching: every call maps to exactly one request.
    """

    def __init__(
        self,
        transport: HTTPTransport | None = None,
        timeout_seconds: float = 30,
        logger: logging.Logger | None = None,
    ):
        self._owns_transport = transport is None
        self.transport: HTTPTransport = transport or AiohttpTransport(
            timeout_seconds=timeout_seconds
        )
        self.logger = logger if logger is not None else get_logger(type(self).__module__)

    async def _core_async_request(self, url: str) -> tuple[bytes, int]:
        """
        Core async HTTP GET request.

        Args:
            url: Fully built and encoded URL

        Returns:
            tuple: (body, status_code)

        Raises:
            asyncio.CancelledError: If the calling task was cancelled before dispatch
            aiohttp.ClientError | TimeoutError: Transport failures, unchanged
        """
        raise_if_cancelled()

        self.logger.debug(f"GET {url}")
        body, status = await self.transport.fetch(url)

        if not 200 <= status < 300:
            # 404s are expected for unknown resources
            if status == 404:
                self.logger.debug(f"API returned status {status} for {url} (resource not found)")
            else:
                self.logger.warning(f"API returned status {status} for {url}")
        return body, status

    async def close(self) -> None:
        """Close the transport if this client created it."""
        close = getattr(self.transport, "close", None)
        if self._owns_transport and close is not None:
            await close()

    async def __aenter__(self) -> Any:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
