"""Periodic removal of expired links."""

from __future__ import annotations

import argparse
import logging
import signal
import threading
import time
from typing import Callable, Optional

from dotenv import load_dotenv

from .database import get_database

log = logging.getLogger(__name__)


def run_every(interval: float, job: Callable[[], object],
              stop_event: Optional[threading.Event] = None) -> int:
    """Run ``job`` at each multiple of ``interval`` seconds until stopped.

    Returns the number of runs; a failing job is logged and the schedule goes on.
    """
    if interval <= 0:
        raise ValueError("interval must be positive")
    stop = stop_event or threading.Event()
    runs = 0
    while not stop.wait(interval - time.time() % interval):
        try:
            job()
        except Exception:
            log.exception("scheduled job failed")
        runs += 1
    return runs


def main(argv: Optional[list[str]] = None) -> int:
    """Delete expired links every minute until SIGINT or SIGTERM arrives."""
    parser = argparse.ArgumentParser(prog="linkshort-cronjobs",
                                     description="Delete expired short links periodically.")
    parser.add_argument("--interval", type=float, default=60.0,
                        help="seconds between runs (default: 60)")
    args = parser.parse_args(argv)
    if args.interval <= 0:
        parser.error("interval must be positive")

    load_dotenv()
    logging.basicConfig(level=logging.INFO, format="[CRONJOBS] %(asctime)s %(message)s")
    log.info("[cronjobs:main] Running cronjob")

    db = get_database()
    stop = threading.Event()
    previous = {sig: signal.signal(sig, lambda signum, frame: stop.set())
                for sig in (signal.SIGINT, signal.SIGTERM)}
    try:
        run_every(args.interval, db.delete_expired_links, stop)
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)
        db.close()
    return 0