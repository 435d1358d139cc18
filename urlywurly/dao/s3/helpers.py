import functools
from collections.abc import Callable
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from urlywurly.dao.exceptions import DataStoreError, ShortURLNotFoundError


__all__ = []

# S3 reports a missing object as NoSuchKey on GET and as a bare 404 on HEAD
NOT_FOUND_ERROR_CODES = frozenset({'NoSuchKey', 'NotFound', '404'})


def handle_s3_client_error[F: Callable[..., Any]](method: F) -> F:
    """Wrap S3-interacting DAO methods to translate botocore errors

    Args:
        method (Callable[..., Any]):
            DAO method performing S3 operations which may raise botocore exceptions.

    Returns:
        Callable[..., Any]:
            Wrapped method which raises ShortURLNotFoundError for missing objects
            and DataStoreError for every other S3 or client failure.

    Example:
        >>> @handle_s3_client_error
        ... def read(self, shortcode):
        ...     with self.s3() as client:
        ...         return client.get_object(Bucket=self.bucket, Key=shortcode)
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except ClientError as e:
            error_code = e.response.get('Error', {}).get('Code')
            if error_code in NOT_FOUND_ERROR_CODES:
                raise ShortURLNotFoundError(f"Object not found in S3 bucket '{self.bucket}'.") from e
            raise DataStoreError(f"S3 request to bucket '{self.bucket}' failed ({error_code}).") from e
        except BotoCoreError as e:
            raise DataStoreError(f"Can't access S3 bucket '{self.bucket}'.") from e

    return wrapper
