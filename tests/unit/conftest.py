from datetime import datetime, timedelta, UTC
from unittest.mock import MagicMock

import pytest

from linkshortener.models import LinkModel
from linkshortener.dao.memory import LinkMemoryDAO, UserMemoryDAO
from linkshortener.services import ExpirySweeper, LinkRegistry, NotificationService, UserDirectory
from linkshortener.utils import ShortCodeGenerator, ShortenerConfig


@pytest.fixture
def config() -> ShortenerConfig:
    return ShortenerConfig()


@pytest.fixture
def link_dao() -> LinkMemoryDAO:
    return LinkMemoryDAO()


@pytest.fixture
def user_dao() -> UserMemoryDAO:
    return UserMemoryDAO()


@pytest.fixture
def directory(user_dao) -> UserDirectory:
    return UserDirectory(user_dao, session_ttl_hours=168)


@pytest.fixture
def generator() -> ShortCodeGenerator:
    return ShortCodeGenerator()


@pytest.fixture
def notifications() -> MagicMock:
    """Notification sink double recording every call."""
    return MagicMock(spec=NotificationService)


@pytest.fixture
def registry(link_dao, generator, config, directory, notifications) -> LinkRegistry:
    return LinkRegistry(link_dao, generator, config, directory=directory, notifications=notifications)


@pytest.fixture
def sweeper(link_dao, config, directory, notifications) -> ExpirySweeper:
    return ExpirySweeper(link_dao, config, directory=directory, notifications=notifications)


@pytest.fixture
def make_link():
    """Build links in any lifecycle state (hours are relative to now, may be negative)."""

    def _make(
        shortcode: str = 'abc1234',
        owner_id: str = 'user-1',
        target: str = 'https://example.com',
        created_hours: float = 0,
        expires_hours: float = 24,
        quota: int = 100,
        clicks: int = 0,
        active: bool = True,
        description: str | None = None,
    ) -> LinkModel:
        now = datetime.now(UTC)
        return LinkModel.restore(
            owner_id=owner_id,
            target=target,
            shortcode=shortcode,
            created_at=now + timedelta(hours=created_hours),
            expires_at=now + timedelta(hours=expires_hours),
            quota=quota,
            clicks=clicks,
            active=active,
            description=description,
        )

    return _make
