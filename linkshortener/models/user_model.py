from dataclasses import dataclass, field
from datetime import datetime, UTC
from uuid import UUID


def utcnow() -> datetime:
    return datetime.now(UTC)


# fmt: off
@dataclass
class UserModel:
    user_id: str                                            # Caller-supplied or generated identifier
    created_at: datetime = field(default_factory=utcnow)    # Registration time (UTC)
    last_activity: datetime = field(default_factory=utcnow) # Refreshed on every owned operation
    email: str | None = None                                # Optional notification address
    link_ids: set[UUID] = field(default_factory=set)        # Best-effort cache of owned links
# fmt: on

    def touch(self) -> None:
        self.last_activity = utcnow()

    def add_link(self, link_id: UUID) -> None:
        self.link_ids.add(link_id)
        self.touch()

    def remove_link(self, link_id: UUID) -> None:
        self.link_ids.discard(link_id)

    def owns_link(self, link_id: UUID) -> bool:
        return link_id in self.link_ids
