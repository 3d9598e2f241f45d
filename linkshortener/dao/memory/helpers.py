import copy
import functools
from typing import Any, TypeVar
from collections.abc import Callable


__all__ = ['synchronized', 'snapshot']


F = TypeVar('F', bound=Callable[..., Any])
T = TypeVar('T')


def synchronized(method: F) -> F:
    """Run an in-memory DAO method while holding the store's lock

    Args:
        method (Callable[..., Any]):
            DAO method reading or writing the store's indexes.

    Returns:
        Callable[..., Any]:
            Wrapped method executed under `self.lock`.

    Example:
        >>> @synchronized
        ... def count(self):
        ...     return len(self._links)
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self.lock:
            return method(self, *args, **kwargs)

    return wrapper


def snapshot(record: T | None) -> T | None:
    """Return a detached copy of a stored record (None passes through)."""
    return None if record is None else copy.deepcopy(record)
