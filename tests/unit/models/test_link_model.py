"""Unit tests for the LinkModel lifecycle in link_model.py.

Test coverage includes:

1. Construction
   - create() validates URL, quota range and expiration ordering.
   - restore() accepts arbitrary timestamps and counters.

2. Identity and immutability
   - Identity fields can't be reassigned, mutable fields can.
   - Equality and hashing follow link_id only.

3. Derived state
   - is_expired, has_reached_limit, can_be_accessed and status priority.
   - usage_percentage cap, hours_remaining, is_near_limit, is_expiring_soon.

4. record_click()
   - Check ordering: inactive, expired, limit reached, then increment.
   - The click reaching the quota succeeds and deactivates the link.

5. set_quota()
   - Range and below-clicks validation leaves the quota unchanged.
   - Reactivation only for links stopped by their limit and not expired.

6. deactivate() and ensure_accessible()
"""

from dataclasses import FrozenInstanceError
from datetime import datetime, timedelta, UTC
from uuid import uuid4

import pytest
from freezegun import freeze_time

from linkshortener.exceptions import (
    ExpiredError,
    InactiveError,
    InvalidQuotaError,
    InvalidURLError,
    LimitReachedError,
    ValidationError,
)
from linkshortener.models import LinkModel, LinkStatus


# -------------------------------------------------
# 1. Construction
# -------------------------------------------------

@freeze_time('2026-01-01 12:00:00')
def test_create_returns_active_link_with_zero_clicks():
    """create() stamps creation time and starts active with no clicks."""
    expires_at = datetime(2026, 1, 2, 12, 0, 0, tzinfo=UTC)

    link = LinkModel.create(
        owner_id='user-1',
        target='  https://example.com/page  ',
        shortcode='abc1234',
        expires_at=expires_at,
        quota=5,
        description='docs',
    )

    assert link.target == 'https://example.com/page'
    assert link.created_at == datetime(2026, 1, 1, 12, 0, 0, tzinfo=UTC)
    assert link.expires_at == expires_at
    assert link.clicks == 0
    assert link.quota == 5
    assert link.active is True
    assert link.description == 'docs'
    assert link.can_be_accessed is True


def test_create_defaults_description_to_empty_string():
    link = LinkModel.create('user-1', 'https://example.com', 'abc1234', datetime.now(UTC) + timedelta(hours=1))
    assert link.description == ''
    assert link.quota == 100


@pytest.mark.parametrize('target', ['', 'example.com', 'mailto:me@example.com', 'javascript:alert(1)', 'https://'])
def test_create_rejects_invalid_url(target):
    with pytest.raises(InvalidURLError):
        LinkModel.create('user-1', target, 'abc1234', datetime.now(UTC) + timedelta(hours=1))


@pytest.mark.parametrize('quota', [0, -1, 1_000_001])
def test_create_rejects_out_of_range_quota(quota):
    with pytest.raises(InvalidQuotaError):
        LinkModel.create('user-1', 'https://example.com', 'abc1234', datetime.now(UTC) + timedelta(hours=1), quota=quota)


def test_create_rejects_expiration_before_creation():
    with pytest.raises(ValidationError):
        LinkModel.create('user-1', 'https://example.com', 'abc1234', datetime.now(UTC) - timedelta(seconds=1))


def test_restore_accepts_already_expired_and_exhausted_state(make_link):
    link = make_link(created_hours=-48, expires_hours=-24, quota=3, clicks=3, active=False)

    assert link.is_expired is True
    assert link.has_reached_limit is True
    assert link.can_be_accessed is False


def test_restore_rejects_negative_clicks(make_link):
    with pytest.raises(ValidationError):
        make_link(clicks=-1)


# -------------------------------------------------
# 2. Identity and immutability
# -------------------------------------------------

@pytest.mark.parametrize(
    'field,value',
    [
        ('link_id', uuid4()),
        ('owner_id', 'user-2'),
        ('target', 'https://other.example.com'),
        ('shortcode', 'zzz9999'),
        ('created_at', datetime(2020, 1, 1, tzinfo=UTC)),
        ('expires_at', datetime(2030, 1, 1, tzinfo=UTC)),
        ('description', 'changed'),
    ],
)
def test_identity_fields_are_immutable(make_link, field, value):
    link = make_link()
    with pytest.raises(FrozenInstanceError):
        setattr(link, field, value)


def test_lifecycle_fields_are_mutable(make_link):
    link = make_link()
    link.clicks = 3
    link.quota = 10
    link.active = False

    assert (link.clicks, link.quota, link.active) == (3, 10, False)


def test_equality_and_hash_follow_link_id(make_link):
    link = make_link()
    same_id = LinkModel.restore(
        owner_id='someone-else',
        target='https://other.example.com',
        shortcode='zzz9999',
        created_at=link.created_at,
        expires_at=link.expires_at,
        link_id=link.link_id,
    )

    assert link == same_id
    assert hash(link) == hash(same_id)
    assert link != make_link()
    assert len({link, same_id}) == 1


# -------------------------------------------------
# 3. Derived state
# -------------------------------------------------

def test_is_expired_is_recomputed_from_the_clock():
    with freeze_time('2026-01-01 00:00:00'):
        link = LinkModel.create('user-1', 'https://example.com', 'abc1234', datetime(2026, 1, 1, 1, 0, tzinfo=UTC))
        assert link.is_expired is False

    with freeze_time('2026-01-01 01:00:00'):
        assert link.is_expired is False  # exactly at expires_at is still valid

    with freeze_time('2026-01-01 01:00:01'):
        assert link.is_expired is True
        assert link.can_be_accessed is False


@pytest.mark.parametrize(
    'kwargs,status',
    [
        ({}, LinkStatus.ACTIVE),
        ({'active': False}, LinkStatus.DEACTIVATED),
        ({'quota': 2, 'clicks': 2, 'active': False}, LinkStatus.LIMIT_REACHED),
        ({'expires_hours': -1, 'created_hours': -2}, LinkStatus.EXPIRED),
        ({'expires_hours': -1, 'created_hours': -2, 'quota': 2, 'clicks': 2, 'active': False}, LinkStatus.EXPIRED),
        ({'quota': 2, 'clicks': 2, 'active': True}, LinkStatus.LIMIT_REACHED),
    ],
)
def test_status_priority(make_link, kwargs, status):
    assert make_link(**kwargs).status == status


def test_usage_percentage_is_capped_at_100(make_link):
    assert make_link(quota=4, clicks=1).usage_percentage == 25.0
    assert make_link(quota=2, clicks=2).usage_percentage == 100.0

    link = make_link(quota=5, clicks=5)
    link.quota = 2  # stale state, clicks above quota
    assert link.usage_percentage == 100.0


@freeze_time('2026-01-01 00:00:00')
def test_hours_remaining_truncates_and_goes_negative():
    now = datetime(2026, 1, 1, tzinfo=UTC)
    link = LinkModel.restore('user-1', 'https://example.com', 'abc1234', now, now + timedelta(hours=5, minutes=59))
    expired = LinkModel.restore('user-1', 'https://example.com', 'abc1235', now - timedelta(hours=5), now - timedelta(hours=3))

    assert link.hours_remaining == 5
    assert expired.hours_remaining == -3


def test_is_near_limit(make_link):
    link = make_link(quota=10, clicks=8)
    assert link.is_near_limit(80) is True
    assert link.is_near_limit(80.1) is False


def test_is_expiring_soon(make_link):
    assert make_link(expires_hours=2).is_expiring_soon(3) is True
    assert make_link(expires_hours=5).is_expiring_soon(3) is False
    assert make_link(created_hours=-2, expires_hours=-1).is_expiring_soon(3) is False


def test_is_owned_by(make_link):
    link = make_link(owner_id='user-1')
    assert link.is_owned_by('user-1') is True
    assert link.is_owned_by('user-2') is False


# -------------------------------------------------
# 4. record_click()
# -------------------------------------------------

def test_record_click_increments_and_returns_target(make_link):
    link = make_link(quota=3)
    assert link.record_click() == 'https://example.com'
    assert link.clicks == 1
    assert link.active is True


def test_click_reaching_quota_succeeds_and_deactivates(make_link):
    link = make_link(quota=1)

    assert link.record_click() == 'https://example.com'
    assert link.clicks == 1
    assert link.has_reached_limit is True
    assert link.active is False
    assert link.can_be_accessed is False


def test_record_click_on_inactive_link_raises_inactive(make_link):
    link = make_link(active=False)
    with pytest.raises(InactiveError):
        link.record_click()
    assert link.clicks == 0


def test_record_click_on_expired_link_deactivates_then_raises(make_link):
    link = make_link(created_hours=-2, expires_hours=-1)
    with pytest.raises(ExpiredError):
        link.record_click()
    assert link.active is False
    assert link.clicks == 0


def test_record_click_at_limit_while_active_deactivates_then_raises(make_link):
    link = make_link(quota=2, clicks=2, active=True)
    with pytest.raises(LimitReachedError):
        link.record_click()
    assert link.active is False
    assert link.clicks == 2


def test_record_click_checks_inactive_before_expired(make_link):
    link = make_link(created_hours=-2, expires_hours=-1, active=False)
    with pytest.raises(InactiveError):
        link.record_click()


# -------------------------------------------------
# 5. set_quota()
# -------------------------------------------------

@pytest.mark.parametrize('quota', [0, -5, 1_000_001])
def test_set_quota_rejects_out_of_range(make_link, quota):
    link = make_link(quota=10)
    with pytest.raises(InvalidQuotaError):
        link.set_quota(quota)
    assert link.quota == 10


def test_set_quota_below_clicks_fails_and_keeps_quota(make_link):
    link = make_link(quota=10, clicks=5)
    with pytest.raises(InvalidQuotaError):
        link.set_quota(4)
    assert link.quota == 10


def test_set_quota_equal_to_clicks_is_allowed(make_link):
    link = make_link(quota=10, clicks=5)
    link.set_quota(5)
    assert link.quota == 5
    assert link.has_reached_limit is True


def test_raising_quota_reactivates_link_stopped_by_limit(make_link):
    link = make_link(quota=1)
    link.record_click()
    assert link.can_be_accessed is False

    link.set_quota(5)

    assert link.active is True
    assert link.can_be_accessed is True


def test_raising_quota_does_not_reactivate_expired_link(make_link):
    link = make_link(created_hours=-3, expires_hours=-1, quota=2, clicks=2, active=False)
    link.set_quota(10)

    assert link.quota == 10
    assert link.active is False
    assert link.can_be_accessed is False


def test_raising_quota_keeps_manual_deactivation(make_link):
    link = make_link(quota=10, clicks=3, active=False)
    link.set_quota(20)
    assert link.active is False


# -------------------------------------------------
# 6. deactivate() and ensure_accessible()
# -------------------------------------------------

def test_deactivate_is_idempotent(make_link):
    link = make_link()
    link.deactivate()
    link.deactivate()
    assert link.active is False
    assert link.status == LinkStatus.DEACTIVATED


@pytest.mark.parametrize(
    'kwargs,error',
    [
        ({'created_hours': -2, 'expires_hours': -1, 'active': False}, ExpiredError),
        ({'quota': 1, 'clicks': 1, 'active': False}, LimitReachedError),
        ({'active': False}, InactiveError),
    ],
)
def test_ensure_accessible_raises_matching_error_without_mutating(make_link, kwargs, error):
    link = make_link(**kwargs)
    before = (link.clicks, link.active)

    with pytest.raises(error):
        link.ensure_accessible()
    assert (link.clicks, link.active) == before


def test_ensure_accessible_passes_for_active_link(make_link):
    make_link().ensure_accessible()
