from __future__ import annotations

import logging
import threading
from enum import Enum
from typing import Optional

import requests

from .config import Settings

logger = logging.getLogger(__name__)

SECURE_PREFIX = "https://"
PING_TIMEOUT_SEC = 30


class KeepAliveState(str, Enum):
    IDLE = "idle"
    SLEEPING = "sleeping"
    PINGING = "pinging"


def resolve_ping_url(settings: Settings) -> str:
    """Pick the URL the process pings to keep itself warm.

    First non-empty source wins: SELF_PING_URL, RENDER_EXTERNAL_URL,
    RENDER_EXTERNAL_HOSTNAME (always over https, no path), then a local
    URL built from HOST/PORT with the scheme chosen by HTTPS.
    """
    if settings.self_ping_url:
        return settings.self_ping_url
    if settings.external_url:
        return settings.external_url
    if settings.external_hostname:
        return f"{SECURE_PREFIX}{settings.external_hostname}"
    scheme = "https" if settings.https else "http"
    return f"{scheme}://{settings.host}:{settings.port}"


class KeepAlive:
    """Periodic self-ping running on a daemon thread.

    The loop sleeps for `interval_sec`, issues one GET and goes back to
    sleep, whatever the outcome. It has no terminal state on its own;
    `stop()` exists for embedders and tests and is checked once per cycle.
    """

    def __init__(
        self,
        url: str,
        interval_sec: int,
        session: Optional[requests.Session] = None,
        timeout: float = PING_TIMEOUT_SEC,
    ):
        self.url = url
        self.interval_sec = interval_sec
        self.session = session or requests.Session()
        self.timeout = timeout
        self.state = KeepAliveState.IDLE
        self.pings = 0
        self.failures = 0
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()

    def ping_once(self) -> bool:
        self.state = KeepAliveState.PINGING
        self.pings += 1
        try:
            resp = self.session.get(self.url, timeout=self.timeout)
        except requests.RequestException as exc:
            self.failures += 1
            logger.warning("Keep-alive ping to %s failed: %s", self.url, exc)
            return False
        finally:
            self.state = KeepAliveState.SLEEPING

        if resp.ok:
            logger.info("Keep-alive ping to %s succeeded (%s)", self.url, resp.status_code)
            return True
        self.failures += 1
        logger.warning("Keep-alive ping to %s returned status %s", self.url, resp.status_code)
        return False

    def run(self) -> None:
        while not self._stop.is_set():
            self.state = KeepAliveState.SLEEPING
            if self._stop.wait(self.interval_sec):
                break
            try:
                self.ping_once()
            except Exception as exc:
                # a ping must never end the loop
                self.state = KeepAliveState.SLEEPING
                logger.warning("Keep-alive ping raised unexpectedly: %s", exc)
        self.state = KeepAliveState.IDLE

    def start(self) -> Optional[threading.Thread]:
        if self.interval_sec <= 0:
            logger.info("Keep-alive interval is 0, self-ping disabled")
            return None
        with self._lock:
            if self._thread is not None:
                return self._thread
            logger.info("Starting keep-alive: GET %s every %ss", self.url, self.interval_sec)
            self.state = KeepAliveState.SLEEPING
            t = threading.Thread(target=self.run, name="keep-alive", daemon=True)
            t.start()
            self._thread = t
            return t

    def stop(self) -> None:
        self._stop.set()

    @property
    def thread(self) -> Optional[threading.Thread]:
        return self._thread


_START_LOCK = threading.Lock()
_RUNNING: Optional[KeepAlive] = None


def start_keep_alive(settings: Settings, session: Optional[requests.Session] = None) -> Optional[KeepAlive]:
    """Start the process-wide keep-alive scheduler if enabled; at most one per process."""
    global _RUNNING
    if not settings.self_ping_enabled:
        logger.info("Keep-alive not enabled (set SELF_PING_ENABLED=true to enable)")
        return None
    if settings.self_ping_interval_sec <= 0:
        logger.info("Keep-alive interval is 0, self-ping disabled")
        return None

    with _START_LOCK:
        if _RUNNING is not None:
            return _RUNNING
        ka = KeepAlive(resolve_ping_url(settings), settings.self_ping_interval_sec, session=session)
        ka.start()
        _RUNNING = ka
        return ka
