"""
HTTPHook - forwards log entries to an HTTP endpoint as JSON.

Usage:
    from httphook import ALL_LEVELS, HTTPHook, LogEntry

    hook = HTTPHook(
        name="cirisbilling",
        endpoint="https://logs.example.com/ingest",
        levels=ALL_LEVELS,
    )

    # Optional: customise the request before it is sent (extra headers etc.)
    def add_token(request):
        request.headers["Authorization"] = "Bearer svc_xxx"

    hook.before_post = add_token

    # Optional: inspect the response before the status code is checked
    def check_ack(response):
        if response.headers.get("x-ingest-status") == "rejected":
            raise RuntimeError("entry rejected by collector")

    hook.after_post = check_ack

    hook.fire(LogEntry("Payment processed", {"user_id": "u123"}))

Each call to fire() performs exactly one POST. Failures are raised, never
retried or swallowed.
"""

from __future__ import annotations

import inspect
import json
import logging
from typing import Any, Awaitable, Callable, Collection, Optional, Union

import httpx

from .entry import LogEntry
from .errors import BadStatusError, BuildRequestError, MarshalError, TransportError

logger = logging.getLogger(__name__)

SERVICE_NAME_HEADER = "service-name"
CONTENT_TYPE_JSON = "application/json"
SUPPORTED_SCHEMES = ("http", "https")

# Anything above 201 Created is a failed delivery.
MAX_SUCCESS_STATUS = 201

BeforeFunc = Callable[[httpx.Request], Optional[Awaitable[None]]]
AfterFunc = Callable[[httpx.Response], Optional[Awaitable[None]]]


def _marshal(entry: LogEntry) -> bytes:
    """Serialize an entry to strict JSON."""
    try:
        return json.dumps(entry.to_payload(), allow_nan=False).encode("utf-8")
    except (TypeError, ValueError, RecursionError) as e:
        raise MarshalError(e) from e


def _build_request(
    client: Union[httpx.Client, httpx.AsyncClient],
    name: str,
    endpoint: str,
    payload: bytes,
) -> httpx.Request:
    """
    Build the POST request and set the identifying headers.

    Only endpoints that cannot name a target are rejected here. A URL with a
    scheme httpx cannot speak (ftp://...) fails later, when it is sent.
    """
    try:
        url = httpx.URL(endpoint)
    except httpx.InvalidURL as e:
        raise BuildRequestError(e) from e

    if not url.scheme:
        raise BuildRequestError(f"missing protocol scheme in {endpoint!r}")
    if url.scheme in SUPPORTED_SCHEMES and not url.host:
        raise BuildRequestError(f"missing host in {endpoint!r}")

    request = client.build_request("POST", url, content=payload)
    request.headers[SERVICE_NAME_HEADER] = name
    request.headers["content-type"] = CONTENT_TYPE_JSON
    return request


def _check_status(endpoint: str, response: httpx.Response) -> None:
    if response.status_code > MAX_SUCCESS_STATUS:
        logger.warning("post=rejected endpoint=%s status=%d", endpoint, response.status_code)
        raise BadStatusError(response.status_code)
    logger.debug("post=ok endpoint=%s status=%d", endpoint, response.status_code)


class _BaseHook:
    """Configuration shared by the sync and async hooks."""

    def __init__(
        self,
        name: str,
        endpoint: str,
        levels: Collection[int],
        before_post: Optional[BeforeFunc] = None,
        after_post: Optional[AfterFunc] = None,
    ):
        """
        Args:
            name: Service name sent in the service-name header
            endpoint: URL entries are posted to (validated on first send)
            levels: Logging levels this hook handles, used by HTTPHookHandler
            before_post: Called with the request before it is sent
            after_post: Called with the response before its status is checked
        """
        self._name = name
        self._endpoint = endpoint
        self._levels = levels
        self.before_post = before_post
        self.after_post = after_post

    @property
    def name(self) -> str:
        return self._name

    @property
    def endpoint(self) -> str:
        return self._endpoint

    def levels(self) -> Collection[int]:
        """Return the levels handled by this hook, exactly as configured."""
        return self._levels

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self._name!r}, endpoint={self._endpoint!r})"


class HTTPHook(_BaseHook):
    """
    Posts log entries to a configured endpoint.

    Holds no per-call state, so one instance can be shared between threads.
    """

    def __init__(
        self,
        name: str,
        endpoint: str,
        levels: Collection[int],
        before_post: Optional[BeforeFunc] = None,
        after_post: Optional[AfterFunc] = None,
        client: Optional[httpx.Client] = None,
    ):
        super().__init__(name, endpoint, levels, before_post, after_post)
        # An injected client belongs to the caller and is never closed here.
        self._owns_client = client is None
        self._client = client if client is not None else httpx.Client()

    def fire(self, entry: LogEntry) -> None:
        """
        Post a single entry to the endpoint.

        Raises:
            MarshalError: the entry is not JSON-serializable
            BuildRequestError: the endpoint has no scheme or no host
            TransportError: the request could not be performed
            BadStatusError: the server answered with a status other than 200/201
            Exception: whatever before_post/after_post raised, unchanged
        """
        payload = _marshal(entry)
        request = _build_request(self._client, self._name, self._endpoint, payload)

        if self.before_post is not None:
            self.before_post(request)

        try:
            response = self._client.send(request)
        except httpx.RequestError as e:
            logger.warning("post=error endpoint=%s error_type=%s", self._endpoint, type(e).__name__)
            raise TransportError(e) from e

        if self.after_post is not None:
            self.after_post(response)

        _check_status(self._endpoint, response)

    def close(self) -> None:
        """Close the HTTP client if this hook created it."""
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "HTTPHook":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


class AsyncHTTPHook(_BaseHook):
    """
    Async variant of HTTPHook for code running inside an event loop.

    Callbacks may be plain functions or coroutine functions.
    """

    def __init__(
        self,
        name: str,
        endpoint: str,
        levels: Collection[int],
        before_post: Optional[BeforeFunc] = None,
        after_post: Optional[AfterFunc] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        super().__init__(name, endpoint, levels, before_post, after_post)
        self._owns_client = client is None
        self._client = client if client is not None else httpx.AsyncClient()

    async def fire(self, entry: LogEntry) -> None:
        """Post a single entry. Raises the same errors as HTTPHook.fire."""
        payload = _marshal(entry)
        request = _build_request(self._client, self._name, self._endpoint, payload)

        if self.before_post is not None:
            result = self.before_post(request)
            if inspect.isawaitable(result):
                await result

        try:
            response = await self._client.send(request)
        except httpx.RequestError as e:
            logger.warning("post=error endpoint=%s error_type=%s", self._endpoint, type(e).__name__)
            raise TransportError(e) from e

        if self.after_post is not None:
            result = self.after_post(response)
            if inspect.isawaitable(result):
                await result

        _check_status(self._endpoint, response)

    async def aclose(self) -> None:
        """Close the HTTP client if this hook created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "AsyncHTTPHook":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
