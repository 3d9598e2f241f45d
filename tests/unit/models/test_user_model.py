"""Unit tests for UserModel in user_model.py.

Test coverage includes:

1. Defaults
   - Timestamps are stamped at construction, email and link set start empty.

2. Activity tracking
   - touch() and add_link() refresh last_activity; remove_link() does not

3. Owned-link cache
   - add_link(), remove_link() (no-op when absent) and owns_link().
"""

from datetime import datetime, UTC
from uuid import uuid4

from freezegun import freeze_time

from linkshortener.models import UserModel


# -------------------------------
# 1. Defaults
# -------------------------------

@freeze_time('2026-03-01 08:00:00')
def test_user_defaults():
    user = UserModel(user_id='user-1')

    assert user.created_at == datetime(2026, 3, 1, 8, 0, tzinfo=UTC)
    assert user.last_activity == user.created_at
    assert user.email is None
    assert user.link_ids == set()


# -------------------------------
# 2. Activity tracking
# -------------------------------

def test_touch_refreshes_last_activity():
    with freeze_time('2026-03-01 08:00:00'):
        user = UserModel(user_id='user-1')

    with freeze_time('2026-03-02 09:30:00'):
        user.touch()

    assert user.created_at == datetime(2026, 3, 1, 8, 0, tzinfo=UTC)
    assert user.last_activity == datetime(2026, 3, 2, 9, 30, tzinfo=UTC)


def test_adding_a_link_counts_as_activity():
    with freeze_time('2026-03-01 08:00:00'):
        user = UserModel(user_id='user-1')

    with freeze_time('2026-03-01 10:00:00'):
        user.add_link(uuid4())

    assert user.last_activity == datetime(2026, 3, 1, 10, 0, tzinfo=UTC)


def test_removing_a_link_is_not_activity():
    link_id = uuid4()
    with freeze_time('2026-03-01 08:00:00'):
        user = UserModel(user_id='user-1', link_ids={link_id})

    with freeze_time('2026-03-01 10:00:00'):
        user.remove_link(link_id)

    assert user.last_activity == datetime(2026, 3, 1, 8, 0, tzinfo=UTC)


# -------------------------------
# 3. Owned-link cache
# -------------------------------

def test_owned_link_cache():
    user = UserModel(user_id='user-1')
    link_id, other_id = uuid4(), uuid4()

    user.add_link(link_id)
    assert user.owns_link(link_id) is True
    assert user.owns_link(other_id) is False

    user.remove_link(other_id)  # absent, no-op
    user.remove_link(link_id)
    assert user.owns_link(link_id) is False
    assert user.link_ids == set()
