from datetime import datetime, timedelta, timezone

import pytest

from linkshort.database import (
    Database,
    DatabaseConfig,
    DatabaseError,
    ShortUrlNotFound,
    get_database,
)
from linkshort.models import ShortUrl

START = datetime(2024, 5, 1, 8, 0, tzinfo=timezone.utc)


class Clock:
    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return Clock(START)


@pytest.fixture
def db(clock):
    database = Database(DatabaseConfig(":memory:"), clock=clock)
    database.create_schema()
    yield database
    database.close()


def new_url(code="abcdEFGH", minutes=10, link="http://example.com/page"):
    return ShortUrl(link=link, exp_time_minutes=minutes, short_code=code)


def test_new(tmp_path):
    config = DatabaseConfig(str(tmp_path / "links.db"))
    first = get_database(config)
    try:
        assert isinstance(first, Database)
        assert get_database(config) is first
    finally:
        first.close()
    second = get_database(config)
    try:
        assert second is not first
        assert second.closed is False
    finally:
        second.close()


def test_health(db):
    stats = db.health()
    assert stats["status"] == "up"
    assert "error" not in stats
    assert stats["message"] == "It's healthy"
    assert stats["open_connections"] == "1"
    assert stats["wait_count"] == "0"


def test_close(db):
    assert db.close() is None
    assert db.closed is True
    with pytest.raises(DatabaseError):
        db.health()


def test_from_env():
    config = DatabaseConfig.from_env({"BLUEPRINT_DB_DATABASE": "links.db"})
    assert config.database == "links.db"
    assert DatabaseConfig.from_env({}).database == ":memory:"


def test_save_and_get_round_trip(db):
    saved = db.save_short_url(new_url())
    assert saved.id is not None
    assert saved.times_clicked == 0
    assert saved.created_at == START
    fetched = db.get_short_url("abcdEFGH")
    assert fetched == saved


def test_save_ignores_given_times_clicked(db):
    url = new_url()
    url.times_clicked = 7
    assert db.save_short_url(url).times_clicked == 0


def test_get_missing_raises(db):
    with pytest.raises(ShortUrlNotFound):
        db.get_short_url("missing")


def test_duplicate_short_code_raises(db):
    db.save_short_url(new_url())
    with pytest.raises(DatabaseError):
        db.save_short_url(new_url(link="http://example.com/other"))


def test_update_times_clicked(db):
    db.save_short_url(new_url())
    db.update_times_clicked("abcdEFGH")
    db.update_times_clicked("abcdEFGH")
    assert db.get_short_url("abcdEFGH").times_clicked == 2


def test_delete_expired_links(db, clock):
    db.save_short_url(new_url("shortone", minutes=5))
    db.save_short_url(new_url("longlong", minutes=60))
    clock.now = START + timedelta(minutes=5)
    assert db.delete_expired_links() == 1
    with pytest.raises(ShortUrlNotFound):
        db.get_short_url("shortone")
    assert db.get_short_url("longlong").short_code == "longlong"


def test_delete_keeps_unexpired(db, clock):
    db.save_short_url(new_url("keepthis", minutes=5))
    clock.now = START + timedelta(minutes=4)
    assert db.delete_expired_links() == 0
    assert db.get_short_url("keepthis").link == "http://example.com/page"


def test_operations_on_closed_database_raise(db):
    db.close()
    with pytest.raises(DatabaseError):
        db.save_short_url(new_url())
    with pytest.raises(DatabaseError):
        db.get_short_url("abcdEFGH")