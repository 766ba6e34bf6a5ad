from __future__ import annotations

import socket
import threading
import time
from typing import Any, List, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.connection import HTTPConnection, HTTPSConnection
from urllib3.connectionpool import HTTPConnectionPool, HTTPSConnectionPool

from station_pipeline.logging_utils import get_logger

log = get_logger(__name__)

PROBE_HEADERS = {
    "User-Agent": "StationPipeline/1.0 (stream reachability check)",
    "Accept": "*/*",
    "Cache-Control": "no-cache",
    "Pragma": "no-cache",
}

# requests is synchronous: every connection a check opens is opened on the
# thread running that check, so the active deadline lives in a thread-local.
_active = threading.local()


class _Deadline:
    """Shuts down every socket one stream check uses once its time is up."""

    def __init__(self, timeout: float) -> None:
        self.expired = False
        self._connections: List[HTTPConnection] = []
        self._lock = threading.Lock()
        self._timer = threading.Timer(timeout, self.expire)
        self._timer.daemon = True

    def start(self) -> None:
        self._timer.start()

    def cancel(self) -> None:
        self._timer.cancel()

    def track(self, conn: HTTPConnection) -> None:
        with self._lock:
            if conn not in self._connections:
                self._connections.append(conn)
            expired = self.expired
        if expired:
            _shutdown(conn)

    def expire(self) -> None:
        with self._lock:
            self.expired = True
            connections = list(self._connections)
        for conn in connections:
            _shutdown(conn)


def _shutdown(conn: HTTPConnection) -> None:
    sock = getattr(conn, "sock", None)
    if sock is None:
        return
    try:
        sock.shutdown(socket.SHUT_RDWR)
    except OSError as e:
        log.debug("stream.shutdown failed", extra={"host": conn.host, "error": str(e)})


def _track(conn: HTTPConnection) -> None:
    deadline = getattr(_active, "deadline", None)
    if deadline is not None:
        deadline.track(conn)


class _TrackedHTTPConnection(HTTPConnection):
    def connect(self):
        super().connect()
        _track(self)


class _TrackedHTTPSConnection(HTTPSConnection):
    def connect(self):
        super().connect()
        _track(self)


class _TrackedHTTPConnectionPool(HTTPConnectionPool):
    ConnectionCls = _TrackedHTTPConnection

    def _get_conn(self, timeout=None):
        conn = super()._get_conn(timeout)
        _track(conn)
        return conn


class _TrackedHTTPSConnectionPool(HTTPSConnectionPool):
    ConnectionCls = _TrackedHTTPSConnection

    def _get_conn(self, timeout=None):
        conn = super()._get_conn(timeout)
        _track(conn)
        return conn


class DeadlineAdapter(HTTPAdapter):
    """HTTPAdapter whose connections can be cut by the running check's deadline."""

    def init_poolmanager(self, *args, **kwargs):
        super().init_poolmanager(*args, **kwargs)
        self.poolmanager.pool_classes_by_scheme = {
            "http": _TrackedHTTPConnectionPool,
            "https": _TrackedHTTPSConnectionPool,
        }


def create_session() -> requests.Session:
    """Session whose requests are cut off when a probe_stream deadline expires."""
    session = requests.Session()
    adapter = DeadlineAdapter(max_retries=0)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    return session


def _release(response: requests.Response, url: str) -> None:
    """Close a streamed response so its connection is freed; never raises."""
    try:
        response.close()
    except (OSError, requests.exceptions.RequestException) as e:
        log.debug("stream.release failed", extra={"url": url, "error": str(e)})


def probe_stream(url: str, timeout: float, session: Optional[Any] = None) -> bool:
    """Check that ``url`` answers a GET with a 2xx status within ``timeout`` seconds.

    The whole request, redirects included, runs under one deadline. When it
    expires, the sockets the request opened are shut down, which aborts the
    in-flight read. The body is never downloaded (``stream=True``) and the
    response is closed on every exit path. Network errors, timeouts, malformed
    URLs and non-2xx statuses all resolve to False instead of raising.

    Args:
        url: Stream endpoint. Empty or blank URLs fail immediately.
        timeout: Seconds allowed for the whole request.
        session: Object with the ``requests.Session.get`` signature. Defaults
                 to a fresh session from create_session(), closed afterwards.
                 Only sessions built by create_session() are cut off at the
                 deadline; others still get the per-read timeout.
    """
    if not url or not url.strip():
        return False

    own_session = session is None
    http = create_session() if own_session else session
    deadline = _Deadline(timeout)
    response: Optional[requests.Response] = None
    started = time.monotonic()
    _active.deadline = deadline
    deadline.start()
    try:
        log.debug("stream.probe GET", extra={"url": url, "timeout": timeout})
        response = http.get(
            url,
            headers=PROBE_HEADERS,
            allow_redirects=True,
            stream=True,
            timeout=(timeout, timeout),
        )
        elapsed = time.monotonic() - started
        if deadline.expired or elapsed > timeout:
            log.debug("stream.probe too slow", extra={"url": url, "elapsed": elapsed})
            return False
        status = response.status_code
        if not 200 <= status < 300:
            log.debug("stream.probe bad status", extra={"url": url, "status": status})
            return False
        return True
    except (requests.exceptions.RequestException, ValueError) as e:
        log.debug("stream.probe failed", extra={"url": url, "error": str(e)})
        return False
    finally:
        deadline.cancel()
        _active.deadline = None
        if response is not None:
            _release(response, url)
        if own_session:
            http.close()
