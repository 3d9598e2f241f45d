class LinkShortenerError(Exception):
    """Base exception for all application-specific errors."""

    error_code = 'app:link_shortener_error'


class ValidationError(LinkShortenerError):
    """Base exception for malformed caller input."""

    error_code = 'validation:validation_error'


class InvalidURLError(ValidationError):
    """Raised when a target URL is empty, too long, or has a disallowed scheme."""

    error_code = 'validation:invalid_url_error'


class InvalidEmailError(ValidationError):
    """Raised when a notification e-mail address is malformed."""

    error_code = 'validation:invalid_email_error'


class InvalidQuotaError(ValidationError):
    """Raised when a click quota is out of range or below the clicks already used."""

    error_code = 'validation:invalid_quota_error'


class InvalidInputError(ValidationError):
    """Raised when a required argument is empty or missing."""

    error_code = 'validation:invalid_input_error'


class AccessDeniedError(LinkShortenerError):
    """Raised when a user operates on a link owned by someone else."""

    error_code = 'auth:access_denied_error'


class LinkAccessError(LinkShortenerError):
    """Base exception for links that can't be dereferenced."""

    error_code = 'link:link_access_error'


class InactiveError(LinkAccessError):
    """Raised when resolving a deactivated link."""

    error_code = 'link:inactive_error'


class ExpiredError(LinkAccessError):
    """Raised when resolving a link past its expiration time."""

    error_code = 'link:expired_error'


class LimitReachedError(LinkAccessError):
    """Raised when resolving a link whose click quota is used up."""

    error_code = 'link:limit_reached_error'


class CodeSpaceExhaustedError(LinkShortenerError):
    """Raised when no unused short code could be generated within the retry bound."""

    error_code = 'shortcode:code_space_exhausted_error'


class ConfigurationError(LinkShortenerError):
    """Base exception for all configuration errors."""

    error_code = 'config:configuration_error'


class MissingConfigurationError(ConfigurationError):
    """Raised when an explicitly requested configuration file doesn't exist."""

    error_code = 'config:missing_configuration_error'


class BadConfigurationError(ConfigurationError):
    """Raised when the application is configured with invalid parameters."""

    error_code = 'config:bad_configuration_error'
