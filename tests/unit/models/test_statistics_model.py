"""Unit tests for LinkStatistics in statistics_model.py.

Test coverage includes:

1. Snapshot of a live link
2. hours_left floored at zero for expired links
3. usage_percentage capped at 100
4. Immutability and as_dict()
"""

from dataclasses import FrozenInstanceError

import pytest

from linkshortener.models import LinkStatistics, LinkStatus


# -------------------------------
# 1. Live link
# -------------------------------

def test_statistics_of_active_link(make_link):
    link = make_link(quota=4, clicks=1, expires_hours=10.5, description='promo')

    stats = LinkStatistics.from_link(link)

    assert stats.shortcode == link.shortcode
    assert stats.target == link.target
    assert stats.created_at == link.created_at
    assert stats.expires_at == link.expires_at
    assert (stats.clicks, stats.quota) == (1, 4)
    assert stats.usage_percentage == 25.0
    assert stats.hours_left == 10
    assert stats.is_active is True
    assert stats.is_expired is False
    assert stats.has_reached_limit is False
    assert stats.can_be_accessed is True
    assert stats.status == LinkStatus.ACTIVE
    assert stats.description == 'promo'


# -------------------------------
# 2. Expired link
# -------------------------------

def test_hours_left_is_floored_at_zero(make_link):
    stats = LinkStatistics.from_link(make_link(created_hours=-30, expires_hours=-6))

    assert stats.hours_left == 0
    assert stats.is_expired is True
    assert stats.status == LinkStatus.EXPIRED


# -------------------------------
# 3. Exhausted link
# -------------------------------

def test_exhausted_link(make_link):
    stats = LinkStatistics.from_link(make_link(quota=2, clicks=2, active=False))

    assert stats.usage_percentage == 100.0
    assert stats.has_reached_limit is True
    assert stats.can_be_accessed is False
    assert stats.status == LinkStatus.LIMIT_REACHED


# -------------------------------
# 4. Immutability and plain data
# -------------------------------

def test_statistics_are_frozen(make_link):
    stats = LinkStatistics.from_link(make_link())
    with pytest.raises(FrozenInstanceError):
        stats.clicks = 99


def test_as_dict(make_link):
    data = LinkStatistics.from_link(make_link(quota=10, clicks=5)).as_dict()

    assert data['clicks'] == 5
    assert data['quota'] == 10
    assert data['usage_percentage'] == 50.0
    assert data['status'] == 'ACTIVE'
