"""Abstract base class for user data access objects (DAOs).

This interface defines the contract for storing user records. Users are
looked up by id only; the owned-link set kept on each record is a cache,
link ownership itself lives on the link.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from linkshortener.dao.memory import UserMemoryDAO
        >>> dao = UserMemoryDAO()
        >>> dao.insert(UserModel(user_id='user-123'))
        >>> dao.update('user-123', lambda user: user.touch())
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

from linkshortener.models import UserModel


class UserBaseDAO(ABC):
    """Interface for user data access objects (DAOs)

    Methods:
        insert(user: UserModel) -> UserModel:
            Insert a new user.
            Raises UserAlreadyExistsError if the id is taken.

        get(user_id: str) -> UserModel:
            Retrieve a user. Raises UserNotFoundError if absent.

        find(user_id: str) -> UserModel | None:
            Retrieve a user or None.

        update(user_id: str, mutator: Callable[[UserModel], Any]) -> Any:
            Apply `mutator` to the stored record atomically and return its result.
            Raises UserNotFoundError if absent.

        remove(user_id: str) -> UserModel | None:
            Delete a user. No-op for unknown ids.

        all() -> list[UserModel]:
        count() -> int:
        clear() -> None:
    """

    @abstractmethod
    def insert(self, user: UserModel) -> UserModel:
        pass

    @abstractmethod
    def get(self, user_id: str) -> UserModel:
        pass

    @abstractmethod
    def find(self, user_id: str) -> UserModel | None:
        pass

    @abstractmethod
    def update(self, user_id: str, mutator: Callable[[UserModel], Any]) -> Any:
        pass

    @abstractmethod
    def remove(self, user_id: str) -> UserModel | None:
        pass

    @abstractmethod
    def all(self) -> list[UserModel]:
        pass

    @abstractmethod
    def count(self) -> int:
        pass

    @abstractmethod
    def clear(self) -> None:
        pass
