"""Exceptions related to Data Access Objects (DAO) operations.

Classes:
    DAOError:
        Generic base class for DAO-related exceptions.

    NotFoundError:
        Raised when a record is not found in the data store.

    LinkNotFoundError / UserNotFoundError:
        Record-specific flavours of NotFoundError.

    AlreadyExistsError:
        Raised when inserting a record whose identity is already taken.

    LinkAlreadyExistsError / UserAlreadyExistsError:
        Record-specific flavours of AlreadyExistsError.

Example:
    >>> from linkshortener.dao.exceptions import LinkNotFoundError
    >>> raise LinkNotFoundError("Link with code 'abc123' not found.")
    Traceback (most recent call last):
        ...
    linkshortener.dao.exceptions.LinkNotFoundError: Link with code 'abc123' not found.
"""

from linkshortener.exceptions import LinkShortenerError


class DAOError(LinkShortenerError):
    """Generic base class for DAO-related exceptions."""

    error_code = 'dao:dao_error'


class NotFoundError(DAOError):
    """Raised when a record is not found in the data store."""

    error_code = 'dao:not_found_error'


class LinkNotFoundError(NotFoundError):
    """Raised when a LinkModel is not found in the data store."""

    error_code = 'dao:link_not_found_error'


class UserNotFoundError(NotFoundError):
    """Raised when a UserModel is not found in the data store."""

    error_code = 'dao:user_not_found_error'


class AlreadyExistsError(DAOError):
    """Raised when inserting a record that already exists in the data store."""

    error_code = 'dao:already_exists_error'


class LinkAlreadyExistsError(AlreadyExistsError):
    """Raised when a link id or short code is already taken in the data store."""

    error_code = 'dao:link_already_exists_error'


class UserAlreadyExistsError(AlreadyExistsError):
    """Raised when creating a user with an id that is already registered."""

    error_code = 'dao:user_already_exists_error'
