"""Polling HTTP client for the companion tool's status endpoints."""

from __future__ import annotations

import logging
import threading
import time
import urllib.error
import urllib.request
from concurrent.futures import Future, ThreadPoolExecutor

__all__ = ["RpcClient", "fetch_bytes"]

log = logging.getLogger(__name__)


def fetch_bytes(url: str, timeout_ms: int) -> bytes:
    """GET ``url`` and return the body; an empty body if nothing came back."""
    try:
        with urllib.request.urlopen(url, timeout=timeout_ms / 1000.0) as resp:
            return resp.read()
    except urllib.error.HTTPError as exc:
        try:
            return exc.read()
        finally:
            exc.close()
    except (OSError, ValueError) as exc:
        log.debug("fetch %s failed: %s", url, exc)
        return b""


class RpcClient:
    """Fetches /status and /version in the background and caches the replies."""

    def __init__(self, base_url: str) -> None:
        self._lock = threading.Lock()
        self._base_url = base_url
        self._status_body = ""
        self._version_body = ""
        self._reachable = False
        self._future: Future[tuple[bytes, bytes]] | None = None
        self._next_fetch = 0.0
        self._executor = ThreadPoolExecutor(max_workers=1)

    def __enter__(self) -> RpcClient:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def close(self) -> None:
        self._executor.shutdown(wait=True)

    @property
    def base_url(self) -> str:
        with self._lock:
            return self._base_url

    @base_url.setter
    def base_url(self, value: str) -> None:
        with self._lock:
            self._base_url = value
            self._reachable = False
            self._status_body = ""
            self._version_body = ""

    @property
    def status_body(self) -> str:
        with self._lock:
            return self._status_body

    @property
    def version_body(self) -> str:
        with self._lock:
            return self._version_body

    @property
    def is_reachable(self) -> bool:
        return self._reachable

    def poll_async(self, interval_ms: int = 1000, timeout_ms: int = 600) -> None:
        """Collect a finished fetch, or start a new one once the interval is up."""
        now = time.monotonic()
        if self._future is not None:
            if self._future.done():
                status, version = self._future.result()
                self._future = None
                with self._lock:
                    self._status_body = status.decode("utf-8", errors="replace")
                    self._version_body = version.decode("utf-8", errors="replace")
                    self._reachable = bool(self._status_body)
                self._next_fetch = now + interval_ms / 1000.0
            return
        if now < self._next_fetch:
            return
        base = self.base_url
        if not base:
            return
        self._future = self._executor.submit(
            lambda: (
                fetch_bytes(base + "/status", timeout_ms),
                fetch_bytes(base + "/version", timeout_ms),
            )
        )

    def fetch_binary(self, path: str, timeout_ms: int = 5000) -> bytes:
        """GET ``path`` under the base URL synchronously."""
        base = self.base_url
        if not base:
            return b""
        return fetch_bytes(base + path, timeout_ms)