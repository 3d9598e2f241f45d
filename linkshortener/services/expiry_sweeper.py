"""Background sweep of expired links

A single daemon thread wakes up every `cleanup_interval_minutes` and
reconciles expired links with the store: with `auto_delete_expired` they are
removed, otherwise they are deactivated and left in place for reporting.

The store lock is never held across a scan: `all()` returns a snapshot and
every affected record is then removed or updated on its own.

Example:
    >>> sweeper = ExpirySweeper(LinkMemoryDAO(), ShortenerConfig())
    >>> sweeper.start()
    >>> ...
    >>> sweeper.stop(timeout=5.0)
    True
"""

import logging
import threading
from dataclasses import dataclass, field

from linkshortener.constants import Cleanup
from linkshortener.dao.base import LinkBaseDAO
from linkshortener.dao.exceptions import LinkNotFoundError
from linkshortener.models import LinkModel
from linkshortener.services.notifications import NotificationService
from linkshortener.services.user_directory import UserDirectory
from linkshortener.utils.config import ShortenerConfig


logger = logging.getLogger(__name__)


# fmt: off
@dataclass
class SweepResult:
    scanned: int = 0                                            # Links looked at
    expired: int = 0                                            # Links found expired
    deleted: list[str] = field(default_factory=list)            # Codes removed from the store
    deactivated: list[str] = field(default_factory=list)        # Codes newly deactivated
    failed: list[str] = field(default_factory=list)             # Codes whose handling raised
# fmt: on


class ExpirySweeper:
    """Periodic expired-link reconciliation.

    Attributes:
        links (LinkBaseDAO):
            Link store to sweep.
        interval (float):
            Seconds between two ticks.
        auto_delete (bool):
            Remove expired links (True) or only deactivate them (False).
        directory (UserDirectory | None):
            Pruned of deleted link ids when set.
        notifications (NotificationService):
            Receives `links_cleaned_up` / `link_expired`.

    Methods:
        start() -> None
        stop(timeout=5.0) -> bool
        sweep() -> SweepResult
    """

    def __init__(
        self,
        link_dao: LinkBaseDAO,
        config: ShortenerConfig,
        directory: UserDirectory | None = None,
        notifications: NotificationService | None = None,
    ):
        self.links = link_dao
        self.interval = config.cleanup_interval_seconds
        self.auto_delete = config.auto_delete_expired
        self.directory = directory
        self.notifications = notifications if notifications is not None else NotificationService(
            directory,
            expire_notification=config.expire_notification,
            limit_notification=config.limit_notification,
        )
        self._stopping = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the background thread. The first tick runs immediately.

        Raises:
            RuntimeError: if the sweeper was already started
        """
        if self._thread is not None:
            raise RuntimeError('Expiry sweeper can only be started once.')

        self._thread = threading.Thread(target=self._run, name='expiry-sweeper', daemon=True)
        self._thread.start()
        logger.info('Expiry sweeper started.', extra={'intervalSeconds': self.interval, 'autoDelete': self.auto_delete})

    def stop(self, timeout: float = Cleanup.SHUTDOWN_GRACE_SECONDS) -> bool:
        """Stop scheduling ticks and wait for the one in flight

        Args:
            timeout (float): seconds to wait for an in-progress tick

        Returns:
            bool: True if the thread finished, False if it was abandoned
        """
        self._stopping.set()
        if self._thread is None:
            return True

        self._thread.join(timeout)
        if self._thread.is_alive():
            logger.warning('Expiry sweeper did not stop in time, abandoning in-flight sweep.', extra={'timeoutSeconds': timeout})
            return False

        logger.info('Expiry sweeper stopped.')
        return True

    def sweep(self) -> SweepResult:
        """Run one reconciliation pass over the whole store

        Per-record failures are logged and recorded in the result; the pass
        carries on with the next record.
        """
        result = SweepResult()
        expired = []
        for link in self.links.all():
            result.scanned += 1
            if link.is_expired:
                expired.append(link)
        result.expired = len(expired)

        if self.auto_delete:
            removed = [link for link in expired if self._delete(link, result)]
            self.notifications.links_cleaned_up(removed)
        else:
            for link in expired:
                self._deactivate(link, result)

        logger.debug(
            'Sweep finished.',
            extra={
                'scanned': result.scanned,
                'expired': result.expired,
                'deleted': len(result.deleted),
                'deactivated': len(result.deactivated),
                'failed': len(result.failed),
            },
        )
        return result

    def _run(self) -> None:
        while not self._stopping.is_set():
            try:
                self.sweep()
            except Exception:
                logger.exception('Expiry sweep failed, retrying on next tick.')
            self._stopping.wait(self.interval)

    def _delete(self, link: LinkModel, result: SweepResult) -> bool:
        try:
            removed = self.links.remove(link.link_id)
            if removed is None:
                return False
            if self.directory is not None:
                self.directory.forget_link(link.owner_id, link.link_id)
        except Exception:
            logger.exception('Failed to delete expired link.', extra={'shortcode': link.shortcode})
            result.failed.append(link.shortcode)
            return False

        result.deleted.append(link.shortcode)
        return True

    def _deactivate(self, link: LinkModel, result: SweepResult) -> None:
        def _expire(stored: LinkModel) -> bool:
            if stored.active and stored.is_expired:
                stored.deactivate()
                return True
            return False

        try:
            changed = self.links.update(link.link_id, _expire)
        except LinkNotFoundError:
            logger.debug('Expired link was removed during the sweep.', extra={'shortcode': link.shortcode})
            return
        except Exception:
            logger.exception('Failed to deactivate expired link.', extra={'shortcode': link.shortcode})
            result.failed.append(link.shortcode)
            return

        if changed:
            result.deactivated.append(link.shortcode)
            self.notifications.link_expired(self.links.find(link.link_id) or link)
