from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any

from linkshortener.models.link_model import LinkModel, LinkStatus


@dataclass(frozen=True)
class LinkStatistics:
    """Read-only usage summary of a single link.

    Attributes:
        shortcode (str): short identifier of the link
        target (str): original long URL
        created_at (datetime): creation time
        expires_at (datetime): expiration time
        quota (int): maximum number of resolutions
        clicks (int): resolutions used so far
        is_active (bool): persisted lifecycle bit
        is_expired (bool): derived, past expiration
        has_reached_limit (bool): derived, quota used up
        can_be_accessed (bool): derived, resolvable right now
        status (LinkStatus): dominant lifecycle state
        description (str): free-text note
        hours_left (int): whole hours until expiration, floored at 0
        usage_percentage (float): clicks / quota in percent, capped at 100
    """

    shortcode: str
    target: str
    created_at: datetime
    expires_at: datetime
    quota: int
    clicks: int
    is_active: bool
    is_expired: bool
    has_reached_limit: bool
    can_be_accessed: bool
    status: LinkStatus
    description: str
    hours_left: int
    usage_percentage: float

    @classmethod
    def from_link(cls, link: LinkModel) -> 'LinkStatistics':
        return cls(
            shortcode=link.shortcode,
            target=link.target,
            created_at=link.created_at,
            expires_at=link.expires_at,
            quota=link.quota,
            clicks=link.clicks,
            is_active=link.active,
            is_expired=link.is_expired,
            has_reached_limit=link.has_reached_limit,
            can_be_accessed=link.can_be_accessed,
            status=link.status,
            description=link.description,
            hours_left=max(0, link.hours_remaining),
            usage_percentage=link.usage_percentage,
        )

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)
