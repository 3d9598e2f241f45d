from enum import StrEnum


class TTL:
    """TTL durations in hours."""

    # Default short link lifetime (fixed by configuration, never by callers)
    LINK_HOURS = 24
    # Idle user session lifetime (1 week)
    USER_SESSION_HOURS = 168


class DefaultQuota:
    """Default and boundary click quota values."""

    LINK_CLICKS = 100  # Default click quota for a new link
    MIN_LINK_CLICKS = 1
    MAX_LINK_CLICKS = 1_000_000


class ShortCode:
    """Short code generation parameters."""

    DEFAULT_LENGTH = 7
    MIN_LENGTH = 4
    MAX_LENGTH = 32
    MAX_ATTEMPTS = 100  # Candidate generations before giving up on a (url, owner) pair


class Cleanup:
    """Expiry sweeper defaults."""

    INTERVAL_MINUTES = 5
    SHUTDOWN_GRACE_SECONDS = 5.0


# Target URL constraints
MAX_URL_LENGTH = 2048
ALLOWED_URL_SCHEMES = frozenset({'http', 'https', 'ftp'})


class ENV:
    """Environment variable names."""

    class App(StrEnum):
        APP_ENV = 'APP_ENV'
        PROJECT_ROOT = 'PROJECT_ROOT'
        CONFIG_PATH = 'SHORTENER_CONFIG'
        LOG_LEVEL = 'LOG_LEVEL'


class Event(StrEnum):
    """Event codes attached to log records (`extra={'event': ...}`)."""

    LINK_CREATED = 'LINK_CREATED'
    LINK_RESOLVED = 'LINK_RESOLVED'
    LINK_NOT_FOUND = 'LINK_NOT_FOUND'
    LINK_EXPIRED = 'LINK_EXPIRED'
    LINK_LIMIT_REACHED = 'LINK_LIMIT_REACHED'
    LINK_NEAR_LIMIT = 'LINK_NEAR_LIMIT'
    LINK_INACTIVE = 'LINK_INACTIVE'
    LINK_QUOTA_UPDATED = 'LINK_QUOTA_UPDATED'
    LINK_DEACTIVATED = 'LINK_DEACTIVATED'
    LINK_DELETED = 'LINK_DELETED'
    LINKS_CLEANED_UP = 'LINKS_CLEANED_UP'
    ACCESS_DENIED = 'ACCESS_DENIED'
    USER_CREATED = 'USER_CREATED'
    USERS_CLEANED_UP = 'USERS_CLEANED_UP'
