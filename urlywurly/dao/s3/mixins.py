"""S3 mixin providing per-call client setup for bucket-backed DAOs.

Responsibilities:
    - Hold the bucket name and S3 client parameters
    - Open a fresh S3 client for every DAO call and close it afterwards

Classes:
    - S3ClientMixin: Base mixin to inject S3 client management into a DAO.

Example:
    Typical usage with a DAO implementation:

        >>> class ShortURLS3DAO(S3ClientMixin, ShortURLBaseDAO):
        ...     pass
        ...
        >>> dao = ShortURLS3DAO(bucket='urly-links')
        >>> with dao.s3() as client:
        ...     client.head_bucket(Bucket=dao.bucket)
"""

from contextlib import contextmanager
from collections.abc import Iterator

import boto3

from urlywurly.types import S3Client


class S3ClientMixin:
    """Mixin S3 client setup for S3-backed DAOs.

    Attributes:
        bucket (str):
            Name of the bucket holding one object per short code.

        s3_region (str | None):
            AWS region of the bucket, None to use the boto3 default chain.

        s3_endpoint_url (str | None):
            Custom S3 endpoint (e.g. LocalStack), None for AWS.

    Methods:
        s3() -> ContextManager[S3Client]:
            Acquire an S3 client for the duration of a single operation.
    """

    def __init__(
        self,
        bucket: str,
        s3_region: str | None = None,
        s3_endpoint_url: str | None = None,
        s3_client: S3Client | None = None,
    ):
        """Initialize an S3-based DAO

        The option is given to either use an existing S3 client instance for every
        call or let the DAO open (and close) a new client for each call.

        Args:
            bucket (str):
                Name of the S3 bucket.

            s3_region (str | None):
                AWS region name. Defaults to the boto3 configuration chain.

            s3_endpoint_url (str | None):
                S3 endpoint override. Defaults to AWS.

            s3_client (S3Client | None):
                Pre-initialized S3 client owned by the caller. It is reused
                for every call and never closed by the DAO.

        Raises:
            ValueError:
                If the bucket name is empty.
        """
        if not bucket:
            raise ValueError(f'Bucket must be a non-empty string (given value: {bucket!r}).')

        self.bucket = bucket
        self.s3_region = s3_region
        self.s3_endpoint_url = s3_endpoint_url
        self._s3_client = s3_client

    @contextmanager
    def s3(self) -> Iterator[S3Client]:
        """Acquire an S3 client for a single operation

        A client created here is closed on every exit path, including errors.

        Yields:
            S3Client: boto3 S3 client
        """
        if self._s3_client is not None:
            yield self._s3_client
            return

        client = boto3.client('s3', region_name=self.s3_region, endpoint_url=self.s3_endpoint_url)
        try:
            yield client
        finally:
            client.close()
