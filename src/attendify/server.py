"""Threaded HTTP server with graceful shutdown.

On SIGINT/SIGTERM the listener stops accepting connections, in-flight requests
get up to SHUTDOWN_TIMEOUT_SECONDS to finish, then `on_shutdown` runs (the app
uses it to close the database pool).
"""

from __future__ import annotations

import logging
import signal
import threading
from typing import Callable, Iterable, Optional

from werkzeug.serving import make_server
from werkzeug.wsgi import ClosingIterator

from .core.constants import SHUTDOWN_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)


class InFlightTracker:
    """WSGI middleware counting requests whose response is not finished yet."""

    def __init__(self, app: Callable):
        self._app = app
        self._active = 0
        self._cond = threading.Condition()

    @property
    def active(self) -> int:
        with self._cond:
            return self._active

    def __call__(self, environ, start_response) -> Iterable[bytes]:
        with self._cond:
            self._active += 1
        try:
            result = self._app(environ, start_response)
        except BaseException:
            self._leave()
            raise
        return ClosingIterator(result, [self._leave])

    def _leave(self) -> None:
        with self._cond:
            self._active -= 1
            if self._active == 0:
                self._cond.notify_all()

    def wait_idle(self, timeout: float) -> bool:
        with self._cond:
            return self._cond.wait_for(lambda: self._active == 0, timeout=timeout)


def serve(
    wsgi_app: Callable,
    *,
    host: str,
    port: int,
    shutdown_timeout: float = SHUTDOWN_TIMEOUT_SECONDS,
    on_shutdown: Optional[Callable[[], None]] = None,
) -> None:
    tracker = InFlightTracker(wsgi_app)
    server = make_server(host, port, tracker, threaded=True)
    stop = threading.Event()

    def _on_signal(signum, _frame):
        logger.info("shutdown signal received", extra={"signal": signal.Signals(signum).name})
        stop.set()

    signal.signal(signal.SIGINT, _on_signal)
    signal.signal(signal.SIGTERM, _on_signal)

    worker = threading.Thread(target=server.serve_forever, name="http-server", daemon=True)
    worker.start()
    logger.info("server listening", extra={"host": host, "port": port})

    stop.wait()

    server.shutdown()
    server.server_close()
    if not tracker.wait_idle(shutdown_timeout):
        logger.warning("shutdown timeout reached", extra={"in_flight": tracker.active})

    if on_shutdown is not None:
        on_shutdown()
    logger.info("server exited")
