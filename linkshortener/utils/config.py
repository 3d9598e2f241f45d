"""Utility functions for application configuration management.

Configuration is read once at process startup and handed to the components
that need it (generator, registry, sweeper, user directory). Nothing in the
core reads files or environment variables on its own.

The configuration document is YAML and follows this structure:

    link:
      short-code-length: 7
      default-ttl-hours: 24
      default-max-clicks: 100
      generation-algorithm: BASE62      # RANDOM | BASE62 | HASH
    notification:
      expire-notification: true
      limit-notification: true
    cleanup:
      check-interval-minutes: 5
      auto-delete-expired: true
    security:
      owner-only-operations: true
      user-session-ttl-hours: 168
    logging:
      level: INFO
      format: text                      # text | json
      file: logs/shortener.log          # optional

Every key is optional; missing keys fall back to `ShortenerConfig` defaults.

Functions:
    app_env() -> str
        Return the current application environment (`APP_ENV`), defaulting to 'local'.

    project_root() -> Path
        Return the project root directory, using `PROJECT_ROOT` when available.

    config_path(path=None) -> tuple[Path, bool]
        Resolve which configuration file to read and whether it was asked for explicitly.

    load_config(path=None) -> ShortenerConfig
        Load and validate the configuration document.

Example:
    >>> from linkshortener.utils.config import load_config
    >>> config = load_config('config/application.yaml')
    >>> config.default_ttl_hours
    24
"""

import os
import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

import yaml

from linkshortener.constants import ENV, TTL, Cleanup, DefaultQuota, ShortCode
from linkshortener.exceptions import BadConfigurationError, MissingConfigurationError
from linkshortener.utils.shortener import GenerationStrategy


logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = Path('config') / 'application.yaml'

# (section, key) in the YAML document -> ShortenerConfig field
DOCUMENT_KEYS = {
    ('link', 'short-code-length'): 'short_code_length',
    ('link', 'default-ttl-hours'): 'default_ttl_hours',
    ('link', 'default-max-clicks'): 'default_quota',
    ('link', 'generation-algorithm'): 'generation_strategy',
    ('notification', 'expire-notification'): 'expire_notification',
    ('notification', 'limit-notification'): 'limit_notification',
    ('cleanup', 'check-interval-minutes'): 'cleanup_interval_minutes',
    ('cleanup', 'auto-delete-expired'): 'auto_delete_expired',
    ('security', 'owner-only-operations'): 'owner_only_operations',
    ('security', 'user-session-ttl-hours'): 'user_session_ttl_hours',
    ('logging', 'level'): 'log_level',
    ('logging', 'format'): 'log_format',
    ('logging', 'file'): 'log_file',
}

LOG_LEVELS = frozenset({'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'})
LOG_FORMATS = frozenset({'text', 'json'})


# fmt: off
@dataclass(frozen=True)
class ShortenerConfig:
    short_code_length: int = ShortCode.DEFAULT_LENGTH                           # Length of generated codes
    default_ttl_hours: int = TTL.LINK_HOURS                                     # Link lifetime, never caller-settable
    default_quota: int = DefaultQuota.LINK_CLICKS                               # Click quota when the caller gives none
    generation_strategy: GenerationStrategy = GenerationStrategy.DETERMINISTIC  # Code generation strategy
    expire_notification: bool = True                                           # Notify owners of expired links
    limit_notification: bool = True                                             # Notify owners of exhausted links
    cleanup_interval_minutes: int = Cleanup.INTERVAL_MINUTES                    # Expiry sweeper period
    auto_delete_expired: bool = True                                            # Delete (True) or deactivate (False) expired links
    owner_only_operations: bool = True                                          # Owner-scoped stats/edit/delete
    user_session_ttl_hours: int = TTL.USER_SESSION_HOURS                        # Idle time before a user is dropped
    log_level: str = 'INFO'
    log_format: str = 'text'
    log_file: str | None = None
# fmt: on

    def __post_init__(self) -> None:
        for name, expected in (
            ('short_code_length', int),
            ('default_ttl_hours', int),
            ('default_quota', int),
            ('cleanup_interval_minutes', int),
            ('user_session_ttl_hours', int),
            ('expire_notification', bool),
            ('limit_notification', bool),
            ('auto_delete_expired', bool),
            ('owner_only_operations', bool),
        ):
            value = getattr(self, name)
            # bool is a subclass of int, reject it for numeric settings
            if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
                raise BadConfigurationError(f"'{name}' must be of type {expected.__name__} (given value: {value!r}).")

        if not ShortCode.MIN_LENGTH <= self.short_code_length <= ShortCode.MAX_LENGTH:
            raise BadConfigurationError(
                f"'short_code_length' must be between {ShortCode.MIN_LENGTH} and {ShortCode.MAX_LENGTH} (given value: {self.short_code_length})."
            )
        for name in ('default_ttl_hours', 'cleanup_interval_minutes', 'user_session_ttl_hours'):
            if getattr(self, name) <= 0:
                raise BadConfigurationError(f"'{name}' must be positive (given value: {getattr(self, name)}).")
        if not DefaultQuota.MIN_LINK_CLICKS <= self.default_quota <= DefaultQuota.MAX_LINK_CLICKS:
            raise BadConfigurationError(
                f"'default_quota' must be between {DefaultQuota.MIN_LINK_CLICKS} and {DefaultQuota.MAX_LINK_CLICKS} (given value: {self.default_quota})."
            )

        try:
            object.__setattr__(self, 'generation_strategy', GenerationStrategy(str(self.generation_strategy).upper()))
        except ValueError as e:
            allowed = ', '.join(strategy.value for strategy in GenerationStrategy)
            raise BadConfigurationError(f"Unknown generation algorithm '{self.generation_strategy}' (allowed: {allowed}).") from e

        object.__setattr__(self, 'log_level', str(self.log_level).upper())
        if self.log_level not in LOG_LEVELS:
            raise BadConfigurationError(f"Unknown log level '{self.log_level}'.")
        if self.log_format not in LOG_FORMATS:
            raise BadConfigurationError(f"Unknown log format '{self.log_format}' (allowed: text, json).")

    @property
    def cleanup_interval_seconds(self) -> float:
        return self.cleanup_interval_minutes * 60.0

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> 'ShortenerConfig':
        """Build a configuration from a parsed YAML document

        Args:
            document (dict): nested mapping as laid out in the module docstring

        Returns:
            ShortenerConfig: validated configuration

        Raises:
            BadConfigurationError: on a malformed document or invalid values
        """
        if not isinstance(document, dict):
            raise BadConfigurationError('Configuration document must be a mapping.')

        values = {}
        for (section, key), name in DOCUMENT_KEYS.items():
            block = document.get(section) or {}
            if not isinstance(block, dict):
                raise BadConfigurationError(f"Configuration section '{section}' must be a mapping.")
            if key in block and block[key] is not None:
                values[name] = block[key]

        return cls(**values)


def app_env() -> str:
    return os.environ.get(ENV.App.APP_ENV, 'local').lower()


def project_root() -> Path:
    return Path(os.environ.get(ENV.App.PROJECT_ROOT, Path.cwd()))


def config_path(path: str | os.PathLike | None = None) -> tuple[Path, bool]:
    """Resolve the configuration file location.

    Precedence: explicit argument, then `SHORTENER_CONFIG`, then
    `<project root>/config/application.yaml`.

    Returns:
        tuple[Path, bool]: the path and whether it was requested explicitly
    """
    if path is not None:
        return Path(path), True
    if os.environ.get(ENV.App.CONFIG_PATH):
        return Path(os.environ[ENV.App.CONFIG_PATH]), True
    return project_root() / DEFAULT_CONFIG_FILE, False


def load_config(path: str | os.PathLike | None = None) -> ShortenerConfig:
    """Load the application configuration.

    A missing default file yields the built-in defaults; a missing file that
    was asked for explicitly is an error. `LOG_LEVEL` overrides the
    configured log level.

    Args:
        path (str | PathLike | None): configuration file to read

    Returns:
        ShortenerConfig: validated, immutable configuration

    Raises:
        MissingConfigurationError: if an explicitly requested file doesn't exist
        BadConfigurationError: if the document can't be parsed or holds invalid values
    """
    resolved, explicit = config_path(path)

    document: dict[str, Any] = {}
    if resolved.is_file():
        logger.debug('Loading configuration file.', extra={'configPath': str(resolved), 'appEnv': app_env()})
        try:
            with resolved.open('r', encoding='utf-8') as f:
                document = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise BadConfigurationError(f"Can't parse configuration file '{resolved}'.") from e
    elif explicit:
        raise MissingConfigurationError(f"Configuration file '{resolved}' does not exist.")
    else:
        logger.debug('No configuration file found, using defaults.', extra={'configPath': str(resolved)})

    config = ShortenerConfig.from_document(document)

    log_level = os.environ.get(ENV.App.LOG_LEVEL)
    if log_level:
        config = replace(config, log_level=log_level)

    return config
