#!/usr/bin/env python3
"""
HTTP transport for feed retrieval.

Timeouts are enforced here; callers never retry.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Optional

import aiohttp

from .config import DEFAULT_USER_AGENT
from .exceptions import TransportError

logger = logging.getLogger(__name__)


class Transport(ABC):
    """Retrieves raw feed documents."""

    @abstractmethod
    async def fetch_text(self, url: str) -> bytes:
        """
        Fetch the document at ``url``.

        Raises:
            TransportError: On non-2xx status or network failure
        """
        pass


class AiohttpTransport(Transport):
    """aiohttp-backed transport sharing one session per async context."""

    def __init__(self, timeout: int = 10, user_agent: str = DEFAULT_USER_AGENT):
        """
        Initialize transport.

        Args:
            timeout: Total request timeout in seconds
            user_agent: User-Agent header sent with every request
        """
        self.timeout = timeout
        self.user_agent = user_agent
        self._session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self):
        """Async context manager entry."""
        self._session = aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=self.timeout),
            headers={
                'User-Agent': self.user_agent
            }
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        if self._session:
            await self._session.close()
            self._session = None

    async def fetch_text(self, url: str) -> bytes:
        if not self._session:
            raise RuntimeError("AiohttpTransport must be used as async context manager")

        try:
            async with self._session.get(url) as response:
                if not 200 <= response.status < 300:
                    raise TransportError(url, response.status, response.reason or '')
                return await response.read()
        except asyncio.TimeoutError:
            logger.error(f"Timeout fetching feed {url}")
            raise TransportError(url, reason=f"timed out after {self.timeout}s")
        except aiohttp.ClientError as e:
            logger.error(f"HTTP error fetching feed {url}: {e}")
            raise TransportError(url, reason=str(e)) from e
