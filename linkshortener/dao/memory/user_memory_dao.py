from collections.abc import Callable
from typing import Any

from beartype import beartype

from linkshortener.models import UserModel
from linkshortener.dao.base import UserBaseDAO
from linkshortener.dao.memory.mixins import LockedStoreMixin
from linkshortener.dao.memory.helpers import snapshot, synchronized
from linkshortener.dao.exceptions import UserAlreadyExistsError, UserNotFoundError


class UserMemoryDAO(LockedStoreMixin, UserBaseDAO):
    """In-memory user store keyed by user id (same locking contract as LinkMemoryDAO)."""

    def __init__(self, lock=None):
        super().__init__(lock=lock)
        self._users: dict[str, UserModel] = {}

    @synchronized
    @beartype
    def insert(self, user: UserModel) -> UserModel:
        if user.user_id in self._users:
            raise UserAlreadyExistsError(f"User with id '{user.user_id}' already exists.")
        self._users[user.user_id] = snapshot(user)
        return snapshot(user)

    @synchronized
    @beartype
    def get(self, user_id: str) -> UserModel:
        user = self._users.get(user_id)
        if user is None:
            raise UserNotFoundError(f"User with id '{user_id}' does not exist.")
        return snapshot(user)

    @synchronized
    @beartype
    def find(self, user_id: str) -> UserModel | None:
        return snapshot(self._users.get(user_id))

    @synchronized
    @beartype
    def update(self, user_id: str, mutator: Callable[[UserModel], Any]) -> Any:
        user = self._users.get(user_id)
        if user is None:
            raise UserNotFoundError(f"User with id '{user_id}' does not exist.")
        return mutator(user)

    @synchronized
    @beartype
    def remove(self, user_id: str) -> UserModel | None:
        return self._users.pop(user_id, None)

    @synchronized
    def all(self) -> list[UserModel]:
        return [snapshot(user) for user in self._users.values()]

    @synchronized
    def count(self) -> int:
        return len(self._users)

    @synchronized
    def clear(self) -> None:
        self._users.clear()
