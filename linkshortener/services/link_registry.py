"""Link registry service

The registry orchestrates the short code generator and the link store to
create, resolve, edit, delete and report on links, enforcing ownership on
every owner-scoped operation.

Responsibilities:
    - Issue per-owner codes and compute expiration from configuration only;
    - Resolve codes, counting each click atomically against the stored record;
    - Gate stats / edit / deactivate / delete behind the ownership check;
    - Report expired and nearly exhausted links.

Example:
    >>> registry = LinkRegistry(LinkMemoryDAO(), ShortCodeGenerator(), ShortenerConfig())
    >>> link = registry.create_link('user-1', 'https://example.com', quota=2)
    >>> registry.resolve(link.shortcode)
    'https://example.com'
    >>> registry.statistics(link.shortcode, 'user-1').clicks
    1
"""

import logging
from datetime import datetime, timedelta, UTC

from beartype import beartype

from linkshortener.constants import Event
from linkshortener.dao.base import LinkBaseDAO
from linkshortener.dao.exceptions import LinkAlreadyExistsError, LinkNotFoundError
from linkshortener.exceptions import AccessDeniedError, ExpiredError, LimitReachedError, LinkAccessError
from linkshortener.models import LinkModel, LinkStatistics
from linkshortener.services.notifications import NotificationService
from linkshortener.services.user_directory import UserDirectory
from linkshortener.utils.config import ShortenerConfig
from linkshortener.utils.shortener import ShortCodeGenerator
from linkshortener.utils.validators import validate_url


logger = logging.getLogger(__name__)


def _access_event(error: LinkAccessError) -> Event:
    if isinstance(error, ExpiredError):
        return Event.LINK_EXPIRED
    if isinstance(error, LimitReachedError):
        return Event.LINK_LIMIT_REACHED
    return Event.LINK_INACTIVE


class LinkRegistry:
    """Service layer over the link store.

    Attributes:
        links (LinkBaseDAO):
            Link store.
        generator (ShortCodeGenerator):
            Short code generator (owns the issued-code ledger).
        config (ShortenerConfig):
            Startup configuration (TTL, default quota, notification flags).
        directory (UserDirectory | None):
            Optional user directory, kept informed of owned links and activity.
        notifications (NotificationService):
            Notification sink.

    Methods:
        create_link(owner_id, url, quota=None, description=None) -> LinkModel
        resolve(code) -> str
        get_owned(code, owner_id) -> LinkModel
        list_owned(owner_id) -> list[LinkModel]
        update_quota(code, owner_id, new_quota) -> LinkModel
        deactivate(code, owner_id) -> LinkModel
        delete(code, owner_id) -> None
        find_expired() -> list[LinkModel]
        find_near_limit(threshold_percent) -> list[LinkModel]
        statistics(code, owner_id) -> LinkStatistics
    """

    def __init__(
        self,
        link_dao: LinkBaseDAO,
        generator: ShortCodeGenerator,
        config: ShortenerConfig,
        directory: UserDirectory | None = None,
        notifications: NotificationService | None = None,
    ):
        self.links = link_dao
        self.generator = generator
        self.config = config
        self.directory = directory
        self.notifications = notifications if notifications is not None else NotificationService(
            directory,
            expire_notification=config.expire_notification,
            limit_notification=config.limit_notification,
        )

    @beartype
    def create_link(self, owner_id: str, url: str, quota: int | None = None, description: str | None = None) -> LinkModel:
        """Create a short link owned by `owner_id`

        The lifetime always comes from `config.default_ttl_hours`. If the
        owner already has a stored link for the same URL (same code), that
        link is returned unchanged.

        Args:
            owner_id (str): identifier of the owning user
            url (str): target URL
            quota (int | None): click quota, `config.default_quota` if None
            description (str | None): free-text note

        Returns:
            LinkModel: snapshot of the stored link

        Raises:
            InvalidURLError: if the URL is invalid
            InvalidQuotaError: if the quota is out of range
            InvalidInputError: if the owner id is empty
            CodeSpaceExhaustedError: if no unused code could be generated
        """
        target = validate_url(url)
        shortcode = self.generator.generate(target, owner_id)

        link = LinkModel.create(
            owner_id=owner_id,
            target=target,
            shortcode=shortcode,
            expires_at=datetime.now(UTC) + timedelta(hours=self.config.default_ttl_hours),
            quota=quota if quota is not None else self.config.default_quota,
            description=description,
        )

        try:
            stored = self.links.insert(link)
        except LinkAlreadyExistsError:
            existing = self.links.find_by_code(shortcode)
            if existing is None:
                # removed between the two calls, the code is free again
                stored = self.links.insert(link)
            else:
                logger.info('Link already exists for this owner and URL.', extra={'shortcode': shortcode, 'ownerId': owner_id})
                return existing
        else:
            self.notifications.link_created(stored)

        if self.directory is not None:
            self.directory.record_link(owner_id, stored.link_id)
        return stored

    @beartype
    def resolve(self, code: str) -> str:
        """Resolve a short code to its target URL, counting one click

        Raises:
            LinkNotFoundError: if the code is unknown
            ExpiredError: if the link has expired
            LimitReachedError: if the click quota is used up
            InactiveError: if the link was deactivated
        """
        link = self.links.find_by_code(code)
        if link is None:
            logger.info('Link not found.', extra={'event': Event.LINK_NOT_FOUND, 'shortcode': code})
            raise LinkNotFoundError(f"Link with code '{code}' not found.")

        def _click(stored: LinkModel) -> tuple[str, bool]:
            stored.ensure_accessible()
            target = stored.record_click()
            return target, stored.has_reached_limit

        try:
            target, exhausted = self.links.update(link.link_id, _click)
        except LinkAccessError as e:
            logger.info('Link cannot be accessed.', extra={'event': _access_event(e), 'shortcode': code})
            raise

        logger.info('Link resolved.', extra={'event': Event.LINK_RESOLVED, 'shortcode': code})
        if exhausted:
            self.notifications.link_limit_reached(self.links.find(link.link_id) or link)
        return target

    @beartype
    def get_owned(self, code: str, owner_id: str) -> LinkModel:
        """Return the link behind `code` if `owner_id` owns it

        Existence is checked before ownership, so a non-owner can tell an
        unknown code (LinkNotFoundError) from someone else's (AccessDeniedError).

        Raises:
            LinkNotFoundError: if the code is unknown
            AccessDeniedError: if the link belongs to another user
        """
        link = self.links.find_by_code(code)
        if link is None:
            raise LinkNotFoundError(f"Link with code '{code}' not found.")
        if not link.is_owned_by(owner_id):
            logger.info('Access denied to link.', extra={'event': Event.ACCESS_DENIED, 'shortcode': code, 'userId': owner_id})
            raise AccessDeniedError(f"Access denied to link '{code}'.")

        if self.directory is not None:
            self.directory.touch(owner_id)
        return link

    @beartype
    def list_owned(self, owner_id: str) -> list[LinkModel]:
        return sorted(self.links.find_by_owner(owner_id), key=lambda link: link.created_at)

    @beartype
    def update_quota(self, code: str, owner_id: str, new_quota: int) -> LinkModel:
        """Change a link's click quota

        Raises:
            LinkNotFoundError / AccessDeniedError: see `get_owned()`
            InvalidQuotaError: if the quota is out of range or below current clicks
        """
        link = self.get_owned(code, owner_id)
        self.links.update(link.link_id, lambda stored: stored.set_quota(new_quota))
        logger.info('Link quota updated.', extra={'event': Event.LINK_QUOTA_UPDATED, 'shortcode': code, 'quota': new_quota})
        return self.links.get(link.link_id)

    @beartype
    def deactivate(self, code: str, owner_id: str) -> LinkModel:
        link = self.get_owned(code, owner_id)
        self.links.update(link.link_id, lambda stored: stored.deactivate())
        logger.info('Link deactivated.', extra={'event': Event.LINK_DEACTIVATED, 'shortcode': code})
        return self.links.get(link.link_id)

    @beartype
    def delete(self, code: str, owner_id: str) -> None:
        link = self.get_owned(code, owner_id)
        self.links.remove(link.link_id)
        if self.directory is not None:
            self.directory.forget_link(owner_id, link.link_id)
        logger.info('Link deleted.', extra={'event': Event.LINK_DELETED, 'shortcode': code})

    def find_expired(self) -> list[LinkModel]:
        return [link for link in self.links.all() if link.is_expired]

    @beartype
    def find_near_limit(self, threshold_percent: int | float) -> list[LinkModel]:
        """Links whose usage is at least `threshold_percent` and that are still accessible."""
        return [link for link in self.links.all() if link.is_near_limit(threshold_percent) and link.can_be_accessed]

    @beartype
    def statistics(self, code: str, owner_id: str) -> LinkStatistics:
        """Read-only usage summary of a link

        With `owner_only_operations` disabled, statistics are readable by any
        user; edits and deletion always require ownership.
        """
        if self.config.owner_only_operations:
            return LinkStatistics.from_link(self.get_owned(code, owner_id))

        link = self.links.find_by_code(code)
        if link is None:
            raise LinkNotFoundError(f"Link with code '{code}' not found.")
        return LinkStatistics.from_link(link)
