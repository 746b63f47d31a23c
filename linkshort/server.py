"""HTTP server for the link shortener API."""

from __future__ import annotations

import argparse
import logging
import os
import re
import signal
import socketserver
import threading
from typing import Mapping, Optional
from wsgiref.simple_server import WSGIRequestHandler, WSGIServer, make_server

from dotenv import load_dotenv

from .database import Database, DatabaseConfig, get_database
from .routes import create_app

log = logging.getLogger(__name__)

_READ_TIMEOUT_SECONDS = 10
_SHUTDOWN_TIMEOUT_SECONDS = 5.0


class _ThreadingWSGIServer(socketserver.ThreadingMixIn, WSGIServer):
    daemon_threads = True


class _RequestHandler(WSGIRequestHandler):
    timeout = _READ_TIMEOUT_SECONDS

    def log_message(self, format: str, *args) -> None:  # noqa: A002
        log.debug("%s - %s", self.address_string(), format % args)


def _parse_port(value: str) -> int:
    if re.fullmatch(r"[+-]?\d+", value):
        return int(value)
    return 0


def new_server(environ: Optional[Mapping[str, str]] = None,
               db: Optional[Database] = None) -> WSGIServer:
    """Create a bound, not yet serving, HTTP server on the PORT variable."""
    env = os.environ if environ is None else environ
    port = _parse_port(env.get("PORT", ""))
    if db is None:
        db = get_database(DatabaseConfig.from_env(env))
    return make_server("0.0.0.0", port, create_app(db),
                       server_class=_ThreadingWSGIServer,
                       handler_class=_RequestHandler)


def _shutdown(server: WSGIServer) -> None:
    stopper = threading.Thread(target=server.shutdown, daemon=True)
    stopper.start()
    stopper.join(_SHUTDOWN_TIMEOUT_SECONDS)
    if stopper.is_alive():
        log.warning("Server forced to shutdown after %.0f seconds",
                    _SHUTDOWN_TIMEOUT_SECONDS)
    server.server_close()


def main(argv: Optional[list[str]] = None) -> int:
    """Run the API until SIGINT or SIGTERM arrives."""
    parser = argparse.ArgumentParser(prog="linkshort-api",
                                     description="Serve the link shortener HTTP API.")
    parser.parse_args(argv)

    load_dotenv()
    logging.basicConfig(level=logging.INFO, format="[API] %(asctime)s %(message)s")
    log.info("[api:main] Running api")

    server = new_server()
    stop = threading.Event()

    def _request_stop(signum, frame) -> None:
        stop.set()

    signals = (signal.SIGINT, signal.SIGTERM)
    previous = {sig: signal.signal(sig, _request_stop) for sig in signals}
    serving = threading.Thread(target=server.serve_forever, daemon=True)
    serving.start()
    try:
        while serving.is_alive() and not stop.wait(0.5):
            pass
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)

    log.info("shutting down gracefully, press Ctrl+C again to force")
    _shutdown(server)
    log.info("Server exiting")
    log.info("Graceful shutdown complete.")
    return 0