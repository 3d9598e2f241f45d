from linkshortener.utils.config import ShortenerConfig, app_env, project_root, load_config
from linkshortener.utils.shortener import CodeLedger, GenerationStrategy, ShortCodeGenerator
from linkshortener.utils.validators import validate_url, validate_email, validate_quota
from linkshortener.utils.logging import initialize_logging


__all__ = [
    'ShortenerConfig',
    'app_env',
    'project_root',
    'load_config',
    'CodeLedger',
    'GenerationStrategy',
    'ShortCodeGenerator',
    'validate_url',
    'validate_email',
    'validate_quota',
    'initialize_logging',
]
