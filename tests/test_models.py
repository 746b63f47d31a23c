from datetime import datetime, timedelta, timezone

import pytest

from linkshort.models import ShortUrl

CREATED = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


def make(minutes=10, created=CREATED):
    return ShortUrl(link="http://example.com", exp_time_minutes=minutes,
                    short_code="abcdEFGH", created_at=created)


def test_defaults():
    url = ShortUrl(link="http://example.com", exp_time_minutes=5, short_code="abcdEFGH")
    assert url.times_clicked == 0
    assert url.id is None
    assert url.created_at is None


def test_expires_at_adds_minutes():
    url = make(minutes=30)
    assert url.expires_at() - CREATED == timedelta(minutes=30)


def test_expires_at_without_created_at_raises():
    url = make(created=None)
    with pytest.raises(ValueError):
        url.expires_at()


def test_not_expired_before_deadline():
    url = make(minutes=10)
    assert url.is_expired(CREATED + timedelta(minutes=9)) is False


def test_not_expired_exactly_at_deadline():
    url = make(minutes=10)
    assert url.is_expired(url.expires_at()) is False


def test_expired_after_deadline():
    url = make(minutes=10)
    assert url.is_expired(url.expires_at() + timedelta(seconds=1)) is True


def test_zero_minutes_expires_immediately_after_creation():
    url = make(minutes=0)
    assert url.is_expired(CREATED + timedelta(microseconds=1)) is True


def test_is_expired_defaults_to_current_time():
    url = make(minutes=10, created=datetime.now(timezone.utc) - timedelta(hours=1))
    assert url.is_expired() is True
    fresh = make(minutes=10, created=datetime.now(timezone.utc))
    assert fresh.is_expired() is False