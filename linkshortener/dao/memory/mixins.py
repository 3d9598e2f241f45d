"""In-memory store mixin providing the shared lock.

Responsibilities:
    - Own the re-entrant lock guarding every index of a store

Classes:
    - LockedStoreMixin: Base mixin to inject lock setup into in-memory DAOs.

Example:
    Typical usage with a DAO implementation:

        >>> class UserMemoryDAO(LockedStoreMixin, UserBaseDAO):
        ...     pass
        ...
        >>> dao = UserMemoryDAO()
        >>> with dao.lock:
        ...     pass
"""

import threading


class LockedStoreMixin:
    """Mixin lock setup for in-memory DAOs.

    Attributes:
        lock (threading.RLock):
            Re-entrant lock held for every read and write of the store's
            indexes. Re-entrant so an `update()` mutator may call back into
            read methods of the same store.
    """

    def __init__(self, lock=None):
        """Initialize the store lock

        Args:
            lock (Optional[threading.RLock]):
                Pre-built lock, e.g. to share one lock between stores.
                If None, a new RLock is created.
        """
        self.lock = lock if lock is not None else threading.RLock()
