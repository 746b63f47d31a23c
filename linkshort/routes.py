"""HTTP routes of the link shortener."""

from __future__ import annotations

import json
import logging
import random
import string
from typing import Any, Optional

from flask import Flask, Response, redirect, request

from .database import Database, DatabaseError
from .models import ShortUrl

log = logging.getLogger(__name__)

_LETTERS = string.ascii_letters
_ALLOWED_METHODS = frozenset({"GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"})
_ALLOWED_HEADERS = frozenset({"accept", "authorization", "content-type", "origin"})


def generate_random_string(length: int) -> str:
    """Return ``length`` random ASCII letters."""
    if length < 0:
        raise ValueError("length must not be negative")
    return "".join(random.choices(_LETTERS, k=length))


def _json(payload: Any, status: int = 200, newline: bool = True,
          sort_keys: bool = False) -> Response:
    body = json.dumps(payload, separators=(",", ":"), ensure_ascii=False, sort_keys=sort_keys)
    return Response(body + ("\n" if newline else ""), status=status,
                    mimetype="application/json")


def _origin_allowed() -> Optional[str]:
    origin = request.headers.get("Origin", "")
    return origin if origin.startswith(("https://", "http://")) else None


def _install_cors(app: Flask) -> None:
    @app.before_request
    def _preflight() -> Optional[Response]:
        method = request.headers.get("Access-Control-Request-Method")
        if request.method != "OPTIONS" or method is None:
            return None
        response = Response(status=200)
        for name in ("Origin", "Access-Control-Request-Method",
                     "Access-Control-Request-Headers"):
            response.headers.add("Vary", name)
        raw = request.headers.get("Access-Control-Request-Headers", "")
        headers = [name.strip() for name in raw.split(",") if name.strip()]
        origin = _origin_allowed()
        if (origin and method.upper() in _ALLOWED_METHODS
                and all(name.lower() in _ALLOWED_HEADERS for name in headers)):
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Access-Control-Allow-Methods"] = method.upper()
            if headers:
                response.headers["Access-Control-Allow-Headers"] = ", ".join(headers)
            response.headers["Access-Control-Allow-Credentials"] = "true"
            response.headers["Access-Control-Max-Age"] = "300"
        return response

    @app.after_request
    def _actual_request(response: Response) -> Response:
        if "Access-Control-Request-Method" in request.headers and request.method == "OPTIONS":
            return response
        response.headers.add("Vary", "Origin")
        origin = _origin_allowed()
        if origin and request.method in _ALLOWED_METHODS:
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Access-Control-Allow-Credentials"] = "true"
        log.info('"%s %s" - %s', request.method, request.path, response.status_code)
        return response


def create_app(db: Optional[Database]) -> Flask:
    """Build the web application serving links stored in ``db``."""
    app = Flask(__name__)
    _install_cors(app)

    @app.get("/")
    def hello_world() -> Response:
        return _json({"message": "Hello World"}, newline=False)

    @app.get("/health")
    def health() -> Response:
        try:
            return _json(db.health(), newline=False, sort_keys=True)
        except DatabaseError as exc:
            return _json({"status": "down", "error": str(exc)}, status=503,
                         newline=False, sort_keys=True)

    @app.get("/short/<short_code>")
    def redirect_url(short_code: str) -> Response:
        try:
            entity = db.get_short_url(short_code)
        except DatabaseError:
            return _json({"status": 404,
                          "message": "Did not found a valid url for the short_code"})
        if entity.is_expired():
            log.info("[routes] The link for short_code {%s} has expired", short_code)
            return _json({"status": 410, "message": "Short Link is expired."})
        response = redirect(entity.link, code=303)
        try:
            db.update_times_clicked(short_code)
        except DatabaseError:
            pass
        return response

    @app.post("/short")
    def short_link() -> Response:
        body = request.get_json(silent=True, force=True)
        body = body if isinstance(body, dict) else {}
        link = body.get("link_to_short")
        minutes = body.get("exp_time_minutes")
        candidate = ShortUrl(
            link=link if isinstance(link, str) else "",
            exp_time_minutes=minutes if type(minutes) is int else 0,
            short_code=generate_random_string(8),
        )
        try:
            entity = db.save_short_url(candidate)
        except DatabaseError:
            return _json({"status": 500, "message": "Something went wrong with generating "
                                                    "short url. Try again later"})
        scheme = "https://" if request.scheme == "https" else "http://"
        return _json({"status": 200,
                      "short_url": f"{scheme}{request.host}/short/{entity.short_code}"})

    return app