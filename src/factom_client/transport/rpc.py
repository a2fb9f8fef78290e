"""
JSON-RPC 2.0 clients for factomd and factom-walletd.

Every client owns its request id counter and its aiohttp session (cookies
set by the node are kept by the session cookie jar). Failed HTTP calls are
retried with exponential backoff; JSON-RPC errors and HTTP 400/401
responses are raised immediately.
"""

from __future__ import annotations
import asyncio
import itertools
import json
import logging
from typing import Optional, Dict, Any, Union

import aiohttp

from ..config import (
    ConnectionOptions,
    RetryOptions,
    to_connection_options,
    FACTOMD_DEFAULT_PORT,
    WALLETD_DEFAULT_PORT,
)
from ..recovery.retry import ExponentialBackoff
from ..runtime.errors import ApiError, TransportError, error_from_response

logger = logging.getLogger(__name__)

DEBUG_API_CALLS = frozenset({
    "holding-queue",
    "network-info",
    "predictive-fer",
    "audit-servers",
    "federated-servers",
    "configuration",
    "process-list",
    "authorities",
    "reload-configuration",
    "drop-rate",
    "set-drop-rate",
    "delay",
    "set-delay",
    "summary",
    "messages",
})

# HTTP statuses that retrying cannot fix
NON_RETRYABLE_STATUSES = frozenset({400, 401})


def _is_retryable(error: Exception) -> bool:
    return getattr(error, "status", None) not in NON_RETRYABLE_STATUSES


class BaseCli:
    """
    Base JSON-RPC client.

    Use as an async context manager, or call ``close()`` when done.
    """

    def __init__(self, conf: Union[None, ConnectionOptions, Dict[str, Any]], default_port: int,
                 session: Optional[aiohttp.ClientSession] = None):
        """
        Initialize client.

        Args:
            conf: Connection options (model, dictionary or None for defaults)
            default_port: Port used when the options do not set one
            session: Externally managed aiohttp session to use instead of an owned one
        """
        self.options = to_connection_options(conf)
        self.base_url = self.options.base_url(default_port)
        self.path = self.options.path
        self.retry = self.options.retry

        self._counter = itertools.count(1)
        self._session = session
        self._owns_session = session is None
        self.closed = False

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        """Close the owned HTTP session."""
        if self.closed:
            return
        self.closed = True
        if self._owns_session and self._session is not None:
            await self._session.close()
            logger.debug(f"Closed session for {self.base_url}")
        self._session = None

    def next_id(self) -> int:
        """Next JSON-RPC request id (starts at 1)."""
        return next(self._counter)

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            connector = None
            if self.options.protocol == "https" and not self.options.reject_unauthorized:
                connector = aiohttp.TCPConnector(ssl=False)

            auth = None
            if self.options.has_auth:
                auth = aiohttp.BasicAuth(self.options.user, self.options.password or "")

            self._session = aiohttp.ClientSession(
                connector=connector,
                auth=auth,
                timeout=aiohttp.ClientTimeout(total=self.options.timeout),
                cookie_jar=aiohttp.CookieJar(unsafe=True),
                headers={"Content-Type": "application/json"},
            )
            logger.debug(f"Created new session for {self.base_url}")

        return self._session

    async def _call(self, path: str, method: str, params: Optional[Dict[str, Any]] = None,
                    timeout: Optional[float] = None,
                    retry: Union[None, RetryOptions, Dict[str, Any]] = None) -> Any:
        """
        Make a JSON-RPC 2.0 call with retries.

        Args:
            path: URL path of the API
            method: RPC method name
            params: Method parameters
            timeout: Request timeout in seconds, overrides the client timeout
            retry: Retry strategy, overrides the client strategy

        Returns:
            ``result`` member of the response

        Raises:
            ApiError: If the node rejected the call
            TransportError: If the node could not be reached
        """
        if self.closed:
            raise TransportError(f"Client for {self.base_url} has been closed")

        if isinstance(retry, dict):
            retry = RetryOptions.model_validate(retry)
        retry = retry or self.retry

        request_data: Dict[str, Any] = {
            "jsonrpc": "2.0",
            "id": self.next_id(),
            "method": method,
        }
        if params is not None:
            request_data["params"] = params

        policy = ExponentialBackoff.from_options(
            retry,
            non_retryable_exceptions=(ApiError,),
            retry_condition=_is_retryable,
        )
        return await policy.execute(self._post, path, request_data, timeout)

    async def _post(self, path: str, request_data: Dict[str, Any], timeout: Optional[float]) -> Any:
        method = request_data["method"]
        params = request_data.get("params")
        session = self._get_session()
        kwargs = {}
        if timeout is not None:
            kwargs["timeout"] = aiohttp.ClientTimeout(total=timeout)

        logger.debug(f"Calling [{method}] on {self.base_url}{path}")
        try:
            async with session.post(self.base_url + path, json=request_data, **kwargs) as response:
                status = response.status
                raw = await response.read()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise TransportError(f"HTTP request to [{method}] failed: {e!r}", cause=e) from e

        try:
            body = json.loads(raw) if raw else None
        except ValueError:
            body = raw.decode("utf-8", errors="replace")

        if isinstance(body, dict):
            api_error = error_from_response(method, params, body, status)
            if api_error is not None:
                raise api_error

        if status >= 300:
            raise TransportError(f"HTTP {status}: {body}", status=status, details={"method": method})

        if not isinstance(body, dict) or "result" not in body:
            raise TransportError(f"Malformed JSON-RPC response to [{method}]: {body}", status=status)

        return body["result"]


class FactomdCli(BaseCli):
    """
    factomd API client.

    Debug methods (``holding-queue``, ``federated-servers``...) are sent to the
    debug path, every other method to the v2 path.
    """

    def __init__(self, conf: Union[None, ConnectionOptions, Dict[str, Any]] = None,
                 session: Optional[aiohttp.ClientSession] = None):
        super().__init__(conf, FACTOMD_DEFAULT_PORT, session)
        self.debug_path = self.options.debug_path

    def path_for(self, method: str) -> str:
        return self.debug_path if method in DEBUG_API_CALLS else self.path

    async def call(self, method: str, params: Optional[Dict[str, Any]] = None,
                   timeout: Optional[float] = None,
                   retry: Union[None, RetryOptions, Dict[str, Any]] = None) -> Any:
        """
        Make a call to the factomd API.

        Args:
            method: factomd API method name
            params: Parameters the method expects
            timeout: Request timeout in seconds, overrides the client timeout
            retry: Retry strategy, overrides the client strategy

        Returns:
            factomd API result
        """
        return await self._call(self.path_for(method), method, params, timeout, retry)


class WalletdCli(BaseCli):
    """factom-walletd API client."""

    def __init__(self, conf: Union[None, ConnectionOptions, Dict[str, Any]] = None,
                 session: Optional[aiohttp.ClientSession] = None):
        super().__init__(conf, WALLETD_DEFAULT_PORT, session)

    async def call(self, method: str, params: Optional[Dict[str, Any]] = None,
                   timeout: Optional[float] = None,
                   retry: Union[None, RetryOptions, Dict[str, Any]] = None) -> Any:
        """Make a call to the factom-walletd API."""
        return await self._call(self.path, method, params, timeout, retry)


__all__ = [
    "BaseCli",
    "FactomdCli",
    "WalletdCli",
    "DEBUG_API_CALLS",
]
