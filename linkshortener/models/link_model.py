"""Short link record and its lifecycle state machine.

A link is accessible while it is active, not expired and below its click
quota. Only the `active` bit is stored; `is_expired` and `has_reached_limit`
are recomputed from timestamps and counters on every call.

    ACTIVE ──click reaches quota──▶ LIMIT_REACHED ──quota raised──▶ ACTIVE
      │                                  │
      ├──now > expires_at──▶ EXPIRED ◀───┘ (terminal, never reactivated)
      └──deactivate()──▶ DEACTIVATED

Example:
    >>> from datetime import datetime, timedelta, UTC
    >>> link = LinkModel.create(
    ...     owner_id='user-1',
    ...     target='https://example.com',
    ...     shortcode='abc1234',
    ...     expires_at=datetime.now(UTC) + timedelta(hours=24),
    ...     quota=1,
    ... )
    >>> link.record_click()
    'https://example.com'
    >>> link.has_reached_limit, link.can_be_accessed
    (True, False)
"""

from dataclasses import FrozenInstanceError, dataclass, field
from datetime import datetime, UTC
from enum import StrEnum
from typing import Any
from uuid import UUID, uuid4

from linkshortener.constants import DefaultQuota
from linkshortener.exceptions import (
    ExpiredError,
    InactiveError,
    InvalidQuotaError,
    LimitReachedError,
    LinkAccessError,
    ValidationError,
)
from linkshortener.utils.validators import validate_quota, validate_url


IMMUTABLE_FIELDS = frozenset({'link_id', 'owner_id', 'target', 'shortcode', 'created_at', 'expires_at', 'description'})


class LinkStatus(StrEnum):
    ACTIVE = 'ACTIVE'
    EXPIRED = 'EXPIRED'
    LIMIT_REACHED = 'LIMIT REACHED'
    DEACTIVATED = 'DEACTIVATED'


def utcnow() -> datetime:
    return datetime.now(UTC)


# fmt: off
@dataclass(eq=False)
class LinkModel:
    """Represent a user-owned short link.

    Attributes:
        owner_id (str):
            Identifier of the user who created the link.
        target (str):
            The original long URL that the short code redirects to.
        shortcode (str):
            The unique short identifier representing the link.
        expires_at (datetime):
            Moment after which the link can no longer be resolved. Set once
            from configuration, never extended.
        quota (int):
            Maximum number of successful resolutions.
        clicks (int):
            Successful resolutions so far.
        active (bool):
            Persisted lifecycle bit, cleared on limit, expiry or deactivation.
        description (str):
            Free-text note supplied at creation.
        created_at (datetime):
            Creation time (UTC).
        link_id (UUID):
            Process-unique identity of the record.

    NOTE:
        Use `LinkModel.create()` for new links and `LinkModel.restore()` to
        rebuild a record with arbitrary timestamps and counters (tests,
        fixtures). Identity fields can't be reassigned after construction.
    """

    owner_id: str                                       # Owner user id
    target: str                                         # Original long URL
    shortcode: str                                      # Unique short identifier
    expires_at: datetime                                # Fixed expiration moment
    quota: int = DefaultQuota.LINK_CLICKS               # Max successful resolutions
    clicks: int = 0                                     # Successful resolutions so far
    active: bool = True                                 # Persisted lifecycle bit
    description: str = ''                               # Free-text note
    created_at: datetime = field(default_factory=utcnow)
    link_id: UUID = field(default_factory=uuid4)
# fmt: on

    def __post_init__(self) -> None:
        validate_quota(self.quota)
        if self.clicks < 0:
            raise ValidationError(f'Clicks cannot be negative (given value: {self.clicks}).')

    def __setattr__(self, name: str, value: Any) -> None:
        if name in IMMUTABLE_FIELDS and name in self.__dict__:
            raise FrozenInstanceError(f"cannot assign to field '{name}'")
        super().__setattr__(name, value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LinkModel):
            return NotImplemented
        return self.link_id == other.link_id

    def __hash__(self) -> int:
        return hash(self.link_id)

    # ---------------------------------------------------------------
    # Construction
    # ---------------------------------------------------------------

    @classmethod
    def create(
        cls,
        owner_id: str,
        target: str,
        shortcode: str,
        expires_at: datetime,
        quota: int = DefaultQuota.LINK_CLICKS,
        description: str | None = None,
    ) -> 'LinkModel':
        """Create a new, active link with zero clicks.

        Raises:
            InvalidURLError: if the target URL is invalid.
            InvalidQuotaError: if the quota is out of range.
            ValidationError: if the link would expire before it is created.
        """
        created_at = utcnow()
        if expires_at < created_at:
            raise ValidationError('Expiration date cannot be before creation date.')

        return cls(
            owner_id=owner_id,
            target=validate_url(target),
            shortcode=shortcode,
            expires_at=expires_at,
            quota=quota,
            description=description or '',
            created_at=created_at,
        )

    @classmethod
    def restore(
        cls,
        owner_id: str,
        target: str,
        shortcode: str,
        created_at: datetime,
        expires_at: datetime,
        quota: int = DefaultQuota.LINK_CLICKS,
        clicks: int = 0,
        active: bool = True,
        description: str | None = None,
        link_id: UUID | None = None,
    ) -> 'LinkModel':
        """Rebuild a link in an arbitrary lifecycle state.

        Unlike `create()`, timestamps are taken as given and the
        `expires_at >= created_at` ordering is not enforced, so already
        expired or exhausted links can be built directly. URL and quota
        range are still validated.
        """
        return cls(
            owner_id=owner_id,
            target=validate_url(target),
            shortcode=shortcode,
            expires_at=expires_at,
            quota=quota,
            clicks=clicks,
            active=active,
            description=description or '',
            created_at=created_at,
            link_id=link_id or uuid4(),
        )

    # ---------------------------------------------------------------
    # Derived state
    # ---------------------------------------------------------------

    @property
    def is_expired(self) -> bool:
        return utcnow() > self.expires_at

    @property
    def has_reached_limit(self) -> bool:
        return self.clicks >= self.quota

    @property
    def can_be_accessed(self) -> bool:
        return self.active and not self.is_expired and not self.has_reached_limit

    @property
    def status(self) -> LinkStatus:
        if self.is_expired:
            return LinkStatus.EXPIRED
        if self.has_reached_limit:
            return LinkStatus.LIMIT_REACHED
        if not self.active:
            return LinkStatus.DEACTIVATED
        return LinkStatus.ACTIVE

    @property
    def usage_percentage(self) -> float:
        return min(100.0, self.clicks * 100.0 / self.quota)

    @property
    def hours_remaining(self) -> int:
        """Whole hours until expiration, negative once expired."""
        seconds = (self.expires_at - utcnow()).total_seconds()
        return int(seconds / 3600)

    def is_owned_by(self, owner_id: str) -> bool:
        return self.owner_id == owner_id

    def is_near_limit(self, threshold_percent: float) -> bool:
        return self.usage_percentage >= threshold_percent

    def is_expiring_soon(self, threshold_hours: int) -> bool:
        seconds = (self.expires_at - utcnow()).total_seconds()
        return 0 < seconds <= threshold_hours * 3600

    # ---------------------------------------------------------------
    # Transitions
    # ---------------------------------------------------------------

    def access_error(self) -> LinkAccessError | None:
        """Return the error a resolution would fail with right now, if any."""
        if self.is_expired:
            return ExpiredError(f"Link '{self.shortcode}' has expired.")
        if self.has_reached_limit:
            return LimitReachedError(f"Link '{self.shortcode}' has reached its click limit ({self.clicks}/{self.quota}).")
        if not self.active:
            return InactiveError(f"Link '{self.shortcode}' is not active.")
        return None

    def ensure_accessible(self) -> None:
        """Raise the lifecycle error matching the current state, without mutating."""
        error = self.access_error()
        if error is not None:
            raise error

    def record_click(self) -> str:
        """Count one successful resolution and return the target URL.

        The click that reaches the quota succeeds and deactivates the link.
        A click on an expired or exhausted link deactivates it first and
        then fails.

        Raises:
            InactiveError: if the link is already deactivated.
            ExpiredError: if the link has expired.
            LimitReachedError: if the quota was already used up.
        """
        if not self.active:
            raise InactiveError(f"Link '{self.shortcode}' is not active.")

        if self.is_expired:
            self.active = False
            raise ExpiredError(f"Link '{self.shortcode}' has expired.")

        if self.has_reached_limit:
            self.active = False
            raise LimitReachedError(f"Link '{self.shortcode}' has reached its click limit ({self.clicks}/{self.quota}).")

        self.clicks += 1
        if self.has_reached_limit:
            self.active = False

        return self.target

    def set_quota(self, new_quota: int) -> None:
        """Change the click quota, reactivating a link that was stopped only by its limit.

        Raises:
            InvalidQuotaError: if the quota is out of range or below the clicks used.
        """
        validate_quota(new_quota)
        if new_quota < self.clicks:
            raise InvalidQuotaError(f'New click quota ({new_quota}) cannot be less than current clicks ({self.clicks}).')

        stopped_by_limit = not self.active and self.has_reached_limit
        self.quota = new_quota

        if stopped_by_limit and not self.is_expired and not self.has_reached_limit:
            self.active = True

    def deactivate(self) -> None:
        self.active = False
