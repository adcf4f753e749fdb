"""Sample JSON fetching with retries and explicit cancellation."""

from __future__ import annotations

import signal
import threading
from collections.abc import Iterator
from contextlib import contextmanager

import httpx


class FetchError(Exception):
    """Raised when a sample cannot be fetched after all attempts."""

    def __init__(self, message: str, attempts: int = 0) -> None:
        super().__init__(message)
        self.attempts = attempts


class FetchCancelledError(FetchError):
    """Raised when the caller cancels an in-flight fetch."""


class CancellationToken:
    """Caller-owned cancellation flag shared with one fetch."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


@contextmanager
def cancel_on_interrupt(token: CancellationToken) -> Iterator[CancellationToken]:
    """Cancel token on SIGINT while the block runs, restoring the prior handler."""
    if threading.current_thread() is not threading.main_thread():
        yield token
        return

    def _handler(signum: int, frame: object) -> None:
        token.cancel()

    previous = signal.signal(signal.SIGINT, _handler)
    try:
        yield token
    finally:
        signal.signal(signal.SIGINT, previous)


def build_headers(token: str | None = None, cookie: str | None = None) -> dict[str, str]:
    """Return JSON request headers with optional bearer token or cookie."""
    headers = {"Content-Type": "application/json"}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    if cookie:
        headers["Cookie"] = cookie
    return headers


def fetch_json(
    url: str,
    method: str = "GET",
    headers: dict[str, str] | None = None,
    body: object = None,
    timeout: float = 10.0,
    max_retries: int = 3,
    cancel_token: CancellationToken | None = None,
    transport: httpx.BaseTransport | None = None,
) -> object:
    """Fetch and decode a JSON response, retrying failures up to max_retries times."""
    attempts = max(1, max_retries)
    last_error: Exception | None = None

    with httpx.Client(timeout=timeout, transport=transport) as client:
        for attempt in range(1, attempts + 1):
            if cancel_token is not None and cancel_token.cancelled:
                raise FetchCancelledError("Request was cancelled.", attempts=attempt - 1)
            try:
                response = client.request(method.upper(), url, headers=headers, json=body)
                if cancel_token is not None and cancel_token.cancelled:
                    raise FetchCancelledError("Request was cancelled.", attempts=attempt)
                response.raise_for_status()
                return response.json()
            except httpx.HTTPStatusError as error:
                last_error = FetchError(f"HTTP {error.response.status_code}", attempts=attempt)
            except httpx.HTTPError as error:
                last_error = error
            except ValueError as error:
                last_error = FetchError(f"Response is not valid JSON: {error}", attempts=attempt)

    if cancel_token is not None and cancel_token.cancelled:
        raise FetchCancelledError("Request was cancelled.", attempts=attempts)
    if isinstance(last_error, FetchError):
        raise last_error
    raise FetchError(f"Request failed: {last_error}", attempts=attempts) from last_error
