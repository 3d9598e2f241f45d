"""Data Access Object (DAO) implementation for managing short links in memory

This module provides a volatile, thread-safe implementation of LinkBaseDAO.
The store is rebuilt empty on every process start.

Responsibilities:
    - Keep three indexes (by id, by short code, by owner) consistent;
    - Answer each lookup in expected O(1);
    - Apply read-modify-write updates atomically per record;
    - Hand out snapshots so callers never share stored records.

Classes:
    LinkMemoryDAO:
        DAO for storing and retrieving LinkModel records in process memory.

Example:
    >>> from linkshortener.dao.memory import LinkMemoryDAO
    >>> dao = LinkMemoryDAO()
    >>> dao.insert(link)
    >>> dao.get_by_code(link.shortcode) == link
    True
    >>> dao.remove(link.link_id)
    >>> dao.find_by_code(link.shortcode) is None
    True
"""

from collections.abc import Callable
from typing import Any
from uuid import UUID

from beartype import beartype

from linkshortener.models import LinkModel
from linkshortener.dao.base import LinkBaseDAO
from linkshortener.dao.memory.mixins import LockedStoreMixin
from linkshortener.dao.memory.helpers import snapshot, synchronized
from linkshortener.dao.exceptions import LinkAlreadyExistsError, LinkNotFoundError


class LinkMemoryDAO(LockedStoreMixin, LinkBaseDAO):
    """In-memory Data Access Object (DAO) for short links

    All three indexes are only touched while holding `self.lock`
    (see LockedStoreMixin), so a reader never sees a link present in one
    index and missing from another.

    Attributes:
        lock (threading.RLock):
            Lock guarding every index.
        _links (dict[UUID, LinkModel]):
            Stored records by link id.
        _codes (dict[str, UUID]):
            Link id by short code.
        _owners (dict[str, set[UUID]]):
            Link ids by owner id. Owners without links are dropped.
    """

    def __init__(self, lock=None):
        super().__init__(lock=lock)
        self._links: dict[UUID, LinkModel] = {}
        self._codes: dict[str, UUID] = {}
        self._owners: dict[str, set[UUID]] = {}

    @synchronized
    @beartype
    def insert(self, link: LinkModel) -> LinkModel:
        """Insert a new link into every index

        Args:
            link (LinkModel): the link to store (a copy is kept)

        Returns:
            LinkModel: snapshot of the stored link

        Raises:
            LinkAlreadyExistsError:
                If the link id or its short code is already stored.
        """
        if link.link_id in self._links:
            raise LinkAlreadyExistsError(f"Link with id '{link.link_id}' already exists.")
        if link.shortcode in self._codes:
            raise LinkAlreadyExistsError(f"Link with code '{link.shortcode}' already exists.")

        self._index(snapshot(link))
        return snapshot(link)

    @synchronized
    @beartype
    def put(self, link: LinkModel) -> LinkModel:
        """Insert a link or replace the stored link with the same id

        Raises:
            LinkAlreadyExistsError:
                If the short code is bound to a different link id.
        """
        bound_id = self._codes.get(link.shortcode)
        if bound_id is not None and bound_id != link.link_id:
            raise LinkAlreadyExistsError(f"Link with code '{link.shortcode}' already exists.")

        if link.link_id in self._links:
            self._unindex(link.link_id)
        self._index(snapshot(link))
        return snapshot(link)

    @synchronized
    @beartype
    def get(self, link_id: UUID) -> LinkModel:
        link = self._links.get(link_id)
        if link is None:
            raise LinkNotFoundError(f"Link with id '{link_id}' not found.")
        return snapshot(link)

    @synchronized
    @beartype
    def get_by_code(self, shortcode: str) -> LinkModel:
        link = self._lookup_code(shortcode)
        if link is None:
            raise LinkNotFoundError(f"Link with code '{shortcode}' not found.")
        return snapshot(link)

    @synchronized
    @beartype
    def find(self, link_id: UUID) -> LinkModel | None:
        return snapshot(self._links.get(link_id))

    @synchronized
    @beartype
    def find_by_code(self, shortcode: str) -> LinkModel | None:
        return snapshot(self._lookup_code(shortcode))

    @synchronized
    @beartype
    def find_by_owner(self, owner_id: str) -> list[LinkModel]:
        return [snapshot(self._links[link_id]) for link_id in self._owners.get(owner_id, ())]

    @synchronized
    @beartype
    def update(self, link_id: UUID, mutator: Callable[[LinkModel], Any]) -> Any:
        """Apply `mutator` to the stored link while holding the lock

        The short code and owner of a link are immutable, so a mutation
        never invalidates the code or owner index.

        Raises:
            LinkNotFoundError:
                If no link with the given id exists.
        """
        link = self._links.get(link_id)
        if link is None:
            raise LinkNotFoundError(f"Link with id '{link_id}' not found.")
        return mutator(link)

    @synchronized
    @beartype
    def remove(self, link_id: UUID) -> LinkModel | None:
        if link_id not in self._links:
            return None
        return self._unindex(link_id)

    @synchronized
    def all(self) -> list[LinkModel]:
        return [snapshot(link) for link in self._links.values()]

    @synchronized
    def count(self) -> int:
        return len(self._links)

    @synchronized
    def clear(self) -> None:
        self._links.clear()
        self._codes.clear()
        self._owners.clear()

    def _lookup_code(self, shortcode: str) -> LinkModel | None:
        link_id = self._codes.get(shortcode)
        return None if link_id is None else self._links.get(link_id)

    def _index(self, link: LinkModel) -> None:
        self._links[link.link_id] = link
        self._codes[link.shortcode] = link.link_id
        self._owners.setdefault(link.owner_id, set()).add(link.link_id)

    def _unindex(self, link_id: UUID) -> LinkModel:
        link = self._links.pop(link_id)
        self._codes.pop(link.shortcode, None)
        owned = self._owners.get(link.owner_id)
        if owned is not None:
            owned.discard(link_id)
            if not owned:
                del self._owners[link.owner_id]
        return link
