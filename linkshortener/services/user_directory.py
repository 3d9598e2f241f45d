"""User directory service

Creates and looks up users, keeps their activity timestamps and notification
addresses, and maintains the best-effort cache of link ids each user owns.
Link ownership itself is decided by `LinkModel.owner_id`; the cache is only
used for display and may lag behind the link store.

Example:
    >>> directory = UserDirectory(UserMemoryDAO(), session_ttl_hours=168)
    >>> user = directory.create_user()
    >>> directory.set_email(user.user_id, 'me@example.com').email
    'me@example.com'
"""

import logging
from datetime import datetime, timedelta, UTC
from uuid import UUID, uuid4

from beartype import beartype

from linkshortener.constants import TTL, Event
from linkshortener.dao.base import UserBaseDAO
from linkshortener.dao.exceptions import UserNotFoundError
from linkshortener.exceptions import InvalidInputError
from linkshortener.models import UserModel
from linkshortener.utils.validators import validate_email


logger = logging.getLogger(__name__)


class UserDirectory:
    def __init__(self, user_dao: UserBaseDAO, session_ttl_hours: int = TTL.USER_SESSION_HOURS):
        self.users = user_dao
        self.session_ttl_hours = session_ttl_hours

    @beartype
    def create_user(self, user_id: str | None = None) -> UserModel:
        """Register a user under the given id, or under a fresh UUID4 string

        Raises:
            InvalidInputError: if an explicit id is blank
            UserAlreadyExistsError: if the explicit id is already registered
        """
        if user_id is not None and not user_id.strip():
            raise InvalidInputError('User id cannot be empty.')

        user = self.users.insert(UserModel(user_id=user_id.strip() if user_id else str(uuid4())))
        logger.info('User created.', extra={'event': Event.USER_CREATED, 'userId': user.user_id})
        return user

    @beartype
    def get_or_create(self, user_id: str | None = None) -> UserModel:
        if user_id:
            user = self.users.find(user_id)
            if user is not None:
                self.touch(user_id)
                return self.users.get(user_id)
        return self.create_user(user_id)

    @beartype
    def find_user(self, user_id: str) -> UserModel | None:
        return self.users.find(user_id)

    @beartype
    def get_user(self, user_id: str) -> UserModel:
        return self.users.get(user_id)

    @beartype
    def touch(self, user_id: str) -> None:
        """Refresh a user's last activity. Unknown users are ignored."""
        self._update_if_present(user_id, lambda user: user.touch())

    @beartype
    def set_email(self, user_id: str, email: str | None) -> UserModel:
        """Set (or clear with None) the user's notification address

        Raises:
            InvalidEmailError: if the address is malformed
            UserNotFoundError: if the user does not exist
        """
        address = validate_email(email) if email is not None else None

        def _apply(user: UserModel) -> UserModel:
            user.email = address
            user.touch()
            return user

        self.users.update(user_id, _apply)
        return self.users.get(user_id)

    @beartype
    def record_link(self, user_id: str, link_id: UUID) -> None:
        self._update_if_present(user_id, lambda user: user.add_link(link_id))

    @beartype
    def forget_link(self, user_id: str, link_id: UUID) -> None:
        self._update_if_present(user_id, lambda user: user.remove_link(link_id))

    def cleanup_inactive(self) -> list[str]:
        """Drop users idle for longer than the session TTL

        Returns:
            list[str]: ids of the removed users
        """
        cutoff = datetime.now(UTC) - timedelta(hours=self.session_ttl_hours)

        removed = []
        for user in self.users.all():
            if user.last_activity < cutoff and self.users.remove(user.user_id) is not None:
                removed.append(user.user_id)

        if removed:
            logger.info('Inactive users removed.', extra={'event': Event.USERS_CLEANED_UP, 'count': len(removed)})
        return removed

    def _update_if_present(self, user_id, mutator) -> None:
        try:
            self.users.update(user_id, mutator)
        except UserNotFoundError:
            logger.debug('Unknown user, nothing to update.', extra={'userId': user_id})
