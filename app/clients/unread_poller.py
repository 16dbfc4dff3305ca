"""Client-side polling of the unread-count endpoints.

The server never pushes counts; clients pull them on a fixed period. The
poller runs that schedule on a daemon thread and can be cancelled at any
time. A request already in flight when ``stop()`` is called is not aborted,
its result is dropped instead.
"""
from __future__ import annotations

import threading
from typing import Callable, Optional

import requests
from loguru import logger

from app.core.config import settings

UNREAD_ENDPOINTS = {
    'notifications': '/api/v1/notifications/unread-count',
    'feedback': '/api/v1/feedback/user-unread-count',
    'feedback-admin': '/api/v1/feedback/unread-count',
}

Fetcher = Callable[[], int]


class UnreadCountError(RuntimeError):
    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def http_fetcher(
    base_url: str,
    path: str,
    token: str,
    session: Optional[requests.Session] = None,
    timeout: float = 10.0,
) -> Fetcher:
    http = session or requests.Session()
    url = f"{base_url.rstrip('/')}{path}"
    headers = {'Authorization': f"Bearer {token}"}

    def fetch() -> int:
        try:
            response = http.get(url, headers=headers, timeout=timeout)
        except requests.RequestException as exc:
            raise UnreadCountError(f"request failed: {exc}") from exc
        if response.status_code != 200:
            raise UnreadCountError(f"unexpected status {response.status_code}", response.status_code)
        try:
            count = response.json()['count']
        except (ValueError, KeyError, TypeError) as exc:
            raise UnreadCountError('malformed count payload', response.status_code) from exc
        return int(count)

    return fetch


class UnreadCountPoller:
    def __init__(
        self,
        fetch: Fetcher,
        interval: Optional[float] = None,
        on_update: Optional[Callable[[int], None]] = None,
        on_error: Optional[Callable[[Exception], None]] = None,
    ) -> None:
        interval = settings.UNREAD_POLL_INTERVAL_SECONDS if interval is None else interval
        if interval <= 0:
            raise ValueError('interval must be positive')
        self._fetch = fetch
        self._interval = interval
        self._on_update = on_update
        self._on_error = on_error
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()
        self._count: Optional[int] = None

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def count(self) -> Optional[int]:
        with self._lock:
            return self._count

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def poll_once(self) -> Optional[int]:
        """Fetch once and apply the result. Returns None when the poll failed."""
        try:
            value = self._fetch()
        except Exception as exc:
            logger.warning('unread_poll_failed', error=str(exc))
            if self._on_error:
                self._notify(self._on_error, exc)
            return None
        if self._stop.is_set() and self._thread is not None:
            return None
        # last write wins, the value is a full recount rather than a delta
        with self._lock:
            self._count = value
        if self._on_update:
            self._notify(self._on_update, value)
        return value

    @staticmethod
    def _notify(callback: Callable, value) -> None:
        # a failing callback must not end the polling thread
        try:
            callback(value)
        except Exception:
            logger.exception('unread_poll_callback_failed', callback=getattr(callback, '__name__', repr(callback)))

    def _run(self) -> None:
        while not self._stop.is_set():
            self.poll_once()
            if self._stop.wait(self._interval):
                break

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name='unread-count-poller', daemon=True)
        self._thread.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)

    def __enter__(self) -> UnreadCountPoller:
        self.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self.stop()
