"""Abstract base class for Link data access objects (DAOs).

This class establishes a consistent contract for all Link DAO implementations,
regardless of the underlying storage mechanism.

Responsibilities:
    - Resolve links by identifier, by short code and by owner.
    - Keep the three lookups consistent with each other on every write.
    - Apply read-modify-write updates to a single record atomically.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from linkshortener.models import LinkModel
        >>> from linkshortener.dao.memory import LinkMemoryDAO

        >>> dao = LinkMemoryDAO()
        >>> dao.insert(link)
        >>> dao.get_by_code('abc1234').target
        'https://example.com/blog/article-123'

        >>> dao.update(link.link_id, lambda stored: stored.record_click())
        'https://example.com/blog/article-123'
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any
from uuid import UUID

from linkshortener.models import LinkModel


class LinkBaseDAO(ABC):
    """Interface for Link data access objects (DAOs).

    Methods:
        insert(link: LinkModel) -> LinkModel:
            Insert a new link.
            Raises LinkAlreadyExistsError if the id or short code is taken.

        put(link: LinkModel) -> LinkModel:
            Insert or replace a link by id.
            Raises LinkAlreadyExistsError if the short code belongs to another link.

        get(link_id: UUID) -> LinkModel:
        get_by_code(shortcode: str) -> LinkModel:
            Retrieve a link. Raises LinkNotFoundError if absent.

        find(link_id: UUID) -> LinkModel | None:
        find_by_code(shortcode: str) -> LinkModel | None:
            Retrieve a link or None.

        find_by_owner(owner_id: str) -> list[LinkModel]:
            All links of an owner, in no particular order.

        update(link_id: UUID, mutator: Callable[[LinkModel], Any]) -> Any:
            Apply `mutator` to the stored record atomically and return its result.
            Raises LinkNotFoundError if absent.

        remove(link_id: UUID) -> LinkModel | None:
            Delete a link from every index. No-op for unknown ids.

        all() -> list[LinkModel]:
        count() -> int:
        clear() -> None:

    NOTE:
        - Every returned LinkModel is a snapshot; mutating it never changes
          the stored record. Use `update()` to change a stored record.
    """

    @abstractmethod
    def insert(self, link: LinkModel) -> LinkModel:
        pass

    @abstractmethod
    def put(self, link: LinkModel) -> LinkModel:
        pass

    @abstractmethod
    def get(self, link_id: UUID) -> LinkModel:
        pass

    @abstractmethod
    def get_by_code(self, shortcode: str) -> LinkModel:
        pass

    @abstractmethod
    def find(self, link_id: UUID) -> LinkModel | None:
        pass

    @abstractmethod
    def find_by_code(self, shortcode: str) -> LinkModel | None:
        pass

    @abstractmethod
    def find_by_owner(self, owner_id: str) -> list[LinkModel]:
        pass

    @abstractmethod
    def update(self, link_id: UUID, mutator: Callable[[LinkModel], Any]) -> Any:
        """Apply a read-modify-write change to a stored link.

        The mutator receives the stored record itself and runs while the
        store is locked, so no concurrent update can interleave. Changes the
        mutator made before raising are kept.

        Args:
            link_id (UUID):
                Identifier of the link to change.
            mutator (Callable[[LinkModel], Any]):
                Function applied to the stored record.

        Returns:
            Any: whatever `mutator` returned.

        Raises:
            LinkNotFoundError:
                If no link with the given id exists.
        """
        pass

    @abstractmethod
    def remove(self, link_id: UUID) -> LinkModel | None:
        pass

    @abstractmethod
    def all(self) -> list[LinkModel]:
        pass

    @abstractmethod
    def count(self) -> int:
        pass

    @abstractmethod
    def clear(self) -> None:
        pass
