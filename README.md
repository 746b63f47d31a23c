# linkshort

A small URL shortener service. It turns long links into eight-letter short
codes, redirects visitors who follow a short link, counts how often each link
was followed, and lets every link expire after a chosen number of minutes.
Links are stored in an SQLite database.

The package ships two commands:

- `linkshort-api` – the HTTP service.
- `linkshort-cronjobs` – a background worker that deletes expired links
  periodically (once a minute by default).

## Configuration

Both commands read their settings from the environment; a `.env` file in the
working directory is loaded automatically.

| Variable                | Meaning                                                        |
|-------------------------|----------------------------------------------------------------|
| `PORT`                  | Port the HTTP service listens on (all interfaces). If it is missing or not a whole number, the system picks a free port. |
| `BLUEPRINT_DB_DATABASE` | Path of the SQLite database file. Defaults to `:memory:`.      |
| `BLUEPRINT_DB_TIMEOUT`  | Seconds to wait for a locked database. Defaults to `1`.        |

The `short_url` table is created automatically when the database is first
opened through `get_database`.

Note that with the default `:memory:` database every process has its own,
empty store: set `BLUEPRINT_DB_DATABASE` to a file path so that
`linkshort-api` and `linkshort-cronjobs` work on the same links and the links
survive a restart.

## Running

Start the HTTP service:

    linkshort-api

It stops on Ctrl+C or SIGTERM, giving requests in progress up to five seconds
to finish.

Start the cleanup worker, which runs until it receives Ctrl+C or SIGTERM:

    linkshort-cronjobs
    linkshort-cronjobs --interval 30

`--interval` sets the number of seconds between runs (default 60); runs are
aligned to multiples of the interval. A failing run is logged and the
schedule continues.

## HTTP API

`GET /`

    {"message":"Hello World"}

`GET /health`

Pings the database and returns connection statistics as JSON (`status`,
`message`, `open_connections`, `in_use`, `idle`, `wait_count`,
`wait_duration`, `max_idle_closed`, `max_lifetime_closed`). If the database
cannot be reached the answer has HTTP status 503 and the body
`{"error": "...", "status": "down"}`.

`POST /short`

Request body:

    {"link_to_short": "https://example.com/some/long/path", "exp_time_minutes": 60}

Response:

    {"status":200,"short_url":"http://localhost:8080/short/aBcDeFgH"}

The body is read as JSON whatever its content type. A missing or non-string
`link_to_short` is stored as an empty link, and a missing or non-integer
`exp_time_minutes` as 0. If the link cannot be stored the body carries
`"status": 500` and a message.

`GET /short/<short_code>`

Redirects (303 See Other) to the stored link and counts the click. An unknown
code answers with `{"status":404,"message":"Did not found a valid url for the short_code"}`,
an expired one with `{"status":410,"message":"Short Link is expired."}`. In
both cases the status is reported in the JSON body; the HTTP status of the
response itself is 200.

Cross-origin requests from any `http://` or `https://` origin are allowed,
with credentials, for the methods GET, POST, PUT, DELETE, OPTIONS and PATCH;
preflight answers are cached for 300 seconds.

## Using it from Python

    import os

    from linkshort.database import DatabaseConfig, get_database
    from linkshort.routes import create_app

    db = get_database(DatabaseConfig.from_env(os.environ))
    app = create_app(db)

`create_app` returns a Flask application, so it can be served by any WSGI
server or exercised with Flask's test client. `linkshort.server.new_server`
builds a bound, not yet serving, threaded WSGI server for it from an
environment mapping.

`linkshort.database.Database` offers `create_schema()`, `health()`,
`save_short_url()`, `get_short_url()`, `update_times_clicked()`,
`delete_expired_links()` (which returns the number of rows removed) and
`close()`. Failures raise `DatabaseError`; looking up an unknown code raises
`ShortUrlNotFound`, which is also a `LookupError`.

Stored links are `ShortUrl` records from `linkshort.models`;
`ShortUrl.expires_at()` and `ShortUrl.is_expired(now)` tell when a link stops
working. `linkshort.routes.generate_random_string(length)` produces the
random letter codes, and `linkshort.cronjobs.run_every(interval, job,
stop_event)` is the scheduler behind the cleanup worker.

## What it does not do

- Storage is SQLite only; there is no support for a database server.
- There are no schema migration commands: the single table is created if it
  does not exist, and nothing more.