"""Input validation helpers shared by models and services.

Functions:
    validate_url(url: str) -> str
        Normalize and validate a target URL (scheme, host, length).
    validate_email(email: str) -> str
        Validate a notification e-mail address.
    validate_quota(quota: int) -> int
        Validate a click quota against the allowed range.

Example:
    >>> from linkshortener.utils.validators import validate_url
    >>> validate_url('  https://example.com/page  ')
    'https://example.com/page'
    >>> validate_url('mailto:someone@example.com')
    Traceback (most recent call last):
        ...
    linkshortener.exceptions.InvalidURLError: Invalid URL format: 'mailto:someone@example.com'. ...
"""

import re
from urllib.parse import urlparse

from linkshortener.constants import ALLOWED_URL_SCHEMES, MAX_URL_LENGTH, DefaultQuota
from linkshortener.exceptions import InvalidEmailError, InvalidQuotaError, InvalidURLError


EMAIL_PATTERN = re.compile(r'^[A-Za-z0-9+_.-]+@[A-Za-z0-9-]+(\.[A-Za-z0-9-]+)*$')
HOSTNAME_PATTERN = re.compile(r'^(localhost|[A-Za-z0-9-]+(\.[A-Za-z0-9-]+)*\.[A-Za-z]{2,}|\d{1,3}(\.\d{1,3}){3})$')


def _shorten(value: str, limit: int = 50) -> str:
    return value if len(value) <= limit else f'{value[: limit - 3]}...'


def validate_url(url: str | None) -> str:
    """Normalize and validate a target URL

    Surrounding whitespace is stripped. The URL must use http, https or ftp,
    carry a plausible host name and fit in 2048 characters.

    Args:
        url (str | None): candidate target URL

    Returns:
        str: the stripped URL

    Raises:
        InvalidURLError: if the URL is empty, malformed or too long
    """
    if url is None or not url.strip():
        raise InvalidURLError('URL cannot be empty.')

    url = url.strip()
    if len(url) > MAX_URL_LENGTH:
        raise InvalidURLError(f'URL length cannot exceed {MAX_URL_LENGTH} characters.')

    try:
        components = urlparse(url)
        hostname = components.hostname
        components.port  # noqa: B018 raises ValueError on a malformed port
    except ValueError as e:
        raise InvalidURLError(f"Invalid URL format: '{_shorten(url)}'.") from e

    if components.scheme.lower() not in ALLOWED_URL_SCHEMES or not hostname or not HOSTNAME_PATTERN.match(hostname):
        raise InvalidURLError(f"Invalid URL format: '{_shorten(url)}'. URL must start with http://, https:// or ftp://")
    if any(char.isspace() for char in url):
        raise InvalidURLError(f"Invalid URL format: '{_shorten(url)}'. URL cannot contain whitespace.")

    return url


def validate_email(email: str) -> str:
    email = email.strip()
    if not EMAIL_PATTERN.match(email):
        raise InvalidEmailError(f"Invalid email format: '{_shorten(email)}'.")
    return email


def validate_quota(quota: int) -> int:
    if quota < DefaultQuota.MIN_LINK_CLICKS:
        raise InvalidQuotaError('Click quota must be positive.')
    if quota > DefaultQuota.MAX_LINK_CLICKS:
        raise InvalidQuotaError(f'Click quota cannot exceed {DefaultQuota.MAX_LINK_CLICKS:,}.')
    return quota
