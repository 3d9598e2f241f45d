"""Unit tests for the NotificationService

Test coverage includes:

1. Structured log records per lifecycle event
2. expire/limit notification switches
3. Owner e-mail delivery reporting
"""

import logging

import pytest

from linkshortener.services import NotificationService


def _events(caplog) -> list[str]:
    return [getattr(record, 'event', None) for record in caplog.records]


@pytest.fixture(autouse=True)
def _capture(caplog):
    caplog.set_level(logging.INFO, logger='linkshortener.services.notifications')


# -------------------------------
# 1. Log records
# -------------------------------

def test_link_created(caplog, make_link):
    NotificationService().link_created(make_link(shortcode='abc1234', quota=5))

    (record,) = caplog.records
    assert record.event == 'LINK_CREATED'
    assert record.shortcode == 'abc1234'
    assert record.quota == 5


def test_link_expired(caplog, make_link):
    NotificationService().link_expired(make_link(created_hours=-30, expires_hours=-6, quota=10, clicks=3))

    (record,) = caplog.records
    assert record.event == 'LINK_EXPIRED'
    assert record.clicks == '3/10'


def test_link_limit_reached(caplog, make_link):
    NotificationService().link_limit_reached(make_link(quota=2, clicks=2, active=False))
    assert _events(caplog) == ['LINK_LIMIT_REACHED']


def test_link_near_limit_respects_threshold(caplog, make_link):
    service = NotificationService()

    service.link_near_limit(make_link(quota=10, clicks=5), 80)
    assert _events(caplog) == []

    service.link_near_limit(make_link(quota=10, clicks=9), 80)
    assert _events(caplog) == ['LINK_NEAR_LIMIT']
    assert caplog.records[0].usagePercentage == 90.0


def test_links_cleaned_up(caplog, make_link):
    service = NotificationService()

    service.links_cleaned_up([])
    assert _events(caplog) == []

    service.links_cleaned_up([make_link(shortcode='old0001'), make_link(shortcode='old0002')])
    (record,) = caplog.records
    assert record.event == 'LINKS_CLEANED_UP'
    assert record.count == 2
    assert record.shortcodes == ['old0001', 'old0002']


# -------------------------------
# 2. Switches
# -------------------------------

def test_disabled_notifications_are_silent(caplog, make_link):
    service = NotificationService(expire_notification=False, limit_notification=False)

    service.link_expired(make_link(created_hours=-30, expires_hours=-6))
    service.link_limit_reached(make_link(quota=1, clicks=1, active=False))
    service.link_near_limit(make_link(quota=10, clicks=9), 50)

    assert _events(caplog) == []


# -------------------------------
# 3. E-mail delivery
# -------------------------------

def test_owner_with_email_is_mailed(caplog, directory, make_link):
    directory.create_user('user-1')
    directory.set_email('user-1', 'owner@example.com')
    caplog.clear()

    NotificationService(directory).link_limit_reached(make_link(owner_id='user-1', quota=1, clicks=1, active=False))

    assert _events(caplog) == ['LINK_LIMIT_REACHED', 'LINK_LIMIT_REACHED']
    assert caplog.records[-1].email == 'owner@example.com'


def test_owner_without_email_is_not_mailed(caplog, directory, make_link):
    directory.create_user('user-1')
    caplog.clear()

    NotificationService(directory).link_expired(make_link(owner_id='user-1', created_hours=-30, expires_hours=-6))

    assert len(caplog.records) == 1
