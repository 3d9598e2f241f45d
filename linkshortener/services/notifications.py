"""Link lifecycle notifications

Turns lifecycle events (creation, expiry, limit reached, cleanup) into
structured log records. When the owner registered a notification e-mail
address, delivery to that address is reported as well; the actual mail
transport is left to whoever consumes these log records.

Example:
    >>> notifications = NotificationService(user_directory)
    >>> notifications.link_limit_reached(link)
    INFO linkshortener.services.notifications: Link reached its click limit. [event=LINK_LIMIT_REACHED ...]
"""

import logging
from collections.abc import Sequence

from linkshortener.constants import Event
from linkshortener.models import LinkModel
from linkshortener.services.user_directory import UserDirectory


logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = '%Y-%m-%d %H:%M:%S'


class NotificationService:
    """Log-backed notification sink.

    Attributes:
        directory (UserDirectory | None):
            Used to look up the owner's notification address.
        expire_notification (bool):
            Emit `link_expired` notifications.
        limit_notification (bool):
            Emit `link_limit_reached` and `link_near_limit` notifications.
    """

    def __init__(self, directory: UserDirectory | None = None, expire_notification: bool = True, limit_notification: bool = True):
        self.directory = directory
        self.expire_notification = expire_notification
        self.limit_notification = limit_notification

    def link_created(self, link: LinkModel) -> None:
        logger.info(
            'Link created.',
            extra={
                'event': Event.LINK_CREATED,
                'shortcode': link.shortcode,
                'ownerId': link.owner_id,
                'expiresAt': link.expires_at.strftime(TIMESTAMP_FORMAT),
                'quota': link.quota,
            },
        )

    def link_expired(self, link: LinkModel) -> None:
        if not self.expire_notification:
            return
        logger.info(
            'Link has expired.',
            extra={
                'event': Event.LINK_EXPIRED,
                'shortcode': link.shortcode,
                'ownerId': link.owner_id,
                'expiredAt': link.expires_at.strftime(TIMESTAMP_FORMAT),
                'clicks': f'{link.clicks}/{link.quota}',
            },
        )
        self._mail_owner(link, Event.LINK_EXPIRED)

    def link_limit_reached(self, link: LinkModel) -> None:
        if not self.limit_notification:
            return
        logger.info(
            'Link reached its click limit.',
            extra={
                'event': Event.LINK_LIMIT_REACHED,
                'shortcode': link.shortcode,
                'ownerId': link.owner_id,
                'clicks': f'{link.clicks}/{link.quota}',
            },
        )
        self._mail_owner(link, Event.LINK_LIMIT_REACHED)

    def link_near_limit(self, link: LinkModel, threshold_percent: float) -> None:
        if not self.limit_notification or not link.is_near_limit(threshold_percent):
            return
        logger.info(
            'Link is near its click limit.',
            extra={
                'event': Event.LINK_NEAR_LIMIT,
                'shortcode': link.shortcode,
                'ownerId': link.owner_id,
                'usagePercentage': round(link.usage_percentage, 1),
            },
        )

    def links_cleaned_up(self, links: Sequence[LinkModel]) -> None:
        if not links:
            return
        logger.info(
            'Expired links removed.',
            extra={
                'event': Event.LINKS_CLEANED_UP,
                'count': len(links),
                'shortcodes': [link.shortcode for link in links],
            },
        )

    def _mail_owner(self, link: LinkModel, event: Event) -> None:
        if self.directory is None:
            return
        owner = self.directory.find_user(link.owner_id)
        if owner is not None and owner.email:
            logger.info('Notification email sent.', extra={'event': event, 'shortcode': link.shortcode, 'email': owner.email})
