"""Utility functions for application configuration management.

Configuration is read from the environment once, at startup, into an
immutable `Settings` object that is passed explicitly into the core
operations and the DAO factory.

Environment variables:
    DOMAIN          - public host name used to build short URLs (required)
    BUCKET          - object storage bucket name (required for the s3 backend)
    PORT            - HTTP listen port (default: 8080)
    STORE_BACKEND   - "s3" (default) or "memory"
    PUBLIC_DIR      - directory of static files served by the HTTP server (default: public)
    AWS_REGION, AWS_ENDPOINT_URL
                    - optional S3 client overrides (e.g. LocalStack)
    TRACING         - "true" to log a span for every core operation

Example:
    >>> from urlywurly.utils.config import load_settings
    >>> os.environ['DOMAIN'] = 'urly.example'
    >>> os.environ['BUCKET'] = 'urly-links'
    >>> settings = load_settings()
    >>> settings.store_backend
    <StoreBackend.S3: 's3'>
"""

import os
import logging
from dataclasses import dataclass

from urlywurly.constants import ENV, StoreBackend, DEFAULT_PORT, DEFAULT_PUBLIC_DIR
from urlywurly.exceptions import BadConfigurationError, MissingEnvironmentVariableError
from urlywurly.utils.helpers import require_environment


logger = logging.getLogger(__name__)

_TRUTHY = frozenset({'1', 'true', 'yes', 'on'})


# fmt: off
@dataclass(frozen=True)
class Settings:
    domain: str                                 # Host name used in public short URLs
    bucket: str | None = None                   # Object storage bucket holding the mappings
    port: int = DEFAULT_PORT                    # HTTP listen port
    store_backend: StoreBackend = StoreBackend.S3
    public_dir: str = DEFAULT_PUBLIC_DIR        # Static files served for every other path
    aws_region: str | None = None
    aws_endpoint_url: str | None = None
    tracing: bool = False
# fmt: on


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise BadConfigurationError(f"Environment variable '{name}' must be an integer (given value: {raw!r}).") from e


@require_environment(ENV.Server.DOMAIN)
def load_settings() -> Settings:
    """Read the application settings from the environment

    Returns:
        Settings: immutable application settings

    Raises:
        MissingEnvironmentVariableError:
            If DOMAIN is missing, or BUCKET is missing for the s3 backend.
        BadConfigurationError:
            If the store backend is unknown or PORT isn't an integer.
    """
    backend_name = os.environ.get(ENV.Store.BACKEND, StoreBackend.S3).strip().lower()
    try:
        backend = StoreBackend(backend_name)
    except ValueError as e:
        choices = ', '.join(f"'{b}'" for b in StoreBackend)
        raise BadConfigurationError(f'Unknown store backend {backend_name!r} (expected one of {choices}).') from e

    bucket = os.environ.get(ENV.Store.BUCKET) or None
    if backend is StoreBackend.S3 and bucket is None:
        raise MissingEnvironmentVariableError(f"Missing required environment variables: '{ENV.Store.BUCKET}'")

    settings = Settings(
        domain=os.environ[ENV.Server.DOMAIN],
        bucket=bucket,
        port=_int_env(ENV.Server.PORT, DEFAULT_PORT),
        store_backend=backend,
        public_dir=os.environ.get(ENV.Server.PUBLIC_DIR) or DEFAULT_PUBLIC_DIR,
        aws_region=os.environ.get(ENV.AWS.REGION) or None,
        aws_endpoint_url=os.environ.get(ENV.AWS.ENDPOINT_URL) or None,
        tracing=os.environ.get(ENV.App.TRACING, '').strip().lower() in _TRUTHY,
    )
    logger.debug(
        'Loaded settings from environment.',
        extra={'storeBackend': settings.store_backend.value, 'domain': settings.domain, 'bucket': settings.bucket},
    )
    return settings
