"""Short URL DAO factory: pick the store adapter from settings.

The rest of the application only sees ShortURLBaseDAO and stays ignorant of
where mappings live.

Backends:
    s3      - ShortURLS3DAO on `settings.bucket` (default)
    memory  - ShortURLMemoryDAO, process-local

Example:
    >>> from urlywurly.utils.config import Settings
    >>> dao = get_short_url_dao(Settings(domain='urly.example', bucket='urly-links'))
    >>> type(dao).__name__
    'ShortURLS3DAO'
"""

import logging

from urlywurly.constants import StoreBackend
from urlywurly.dao.base import ShortURLBaseDAO
from urlywurly.dao.s3 import ShortURLS3DAO
from urlywurly.dao.memory import ShortURLMemoryDAO
from urlywurly.exceptions import BadConfigurationError
from urlywurly.utils.config import Settings


logger = logging.getLogger(__name__)


def get_short_url_dao(settings: Settings) -> ShortURLBaseDAO:
    """Return the ShortURL DAO configured by `settings.store_backend`

    Raises:
        BadConfigurationError: If the backend is unknown or its settings are incomplete.
    """
    logger.debug('Selected short URL store backend.', extra={'storeBackend': str(settings.store_backend)})

    match settings.store_backend:
        case StoreBackend.S3:
            if not settings.bucket:
                raise BadConfigurationError('The s3 store backend requires a bucket name.')
            return ShortURLS3DAO(
                bucket=settings.bucket,
                s3_region=settings.aws_region,
                s3_endpoint_url=settings.aws_endpoint_url,
            )
        case StoreBackend.MEMORY:
            return ShortURLMemoryDAO()

    raise BadConfigurationError(f'Unknown store backend: {settings.store_backend!r}')
