"""Data Access Object (DAO) implementation for managing shortened URLs in S3

This module provides an S3-based implementation of ShortURLBaseDAO. Every
mapping is one object in the configured bucket: the object key is the short
code and the object body is the raw long URL (UTF-8, no metadata). Bytes that
are not valid UTF-8 round-trip as lone surrogates (`surrogateescape`).

Classes:
    ShortURLS3DAO:
        DAO for storing and retrieving ShortURLModel in an S3 bucket.

Example:
    >>> from urlywurly.models import ShortURLModel
    >>> from urlywurly.dao.s3 import ShortURLS3DAO

    >>> dao = ShortURLS3DAO(bucket='urly-links')

    >>> short_url = ShortURLModel(
    ...     target="https://example.com/page",
    ...     shortcode="yfzne"
    ... )
    >>> dao.write(short_url)
    <ShortURLS3DAO>

    >>> dao.read("yfzne").target
    'https://example.com/page'
"""

from contextlib import closing

from beartype import beartype

from urlywurly.models import ShortURLModel
from urlywurly.dao.base import ShortURLBaseDAO
from urlywurly.dao.s3.mixins import S3ClientMixin
from urlywurly.dao.s3.helpers import handle_s3_client_error


class ShortURLS3DAO(S3ClientMixin, ShortURLBaseDAO):
    """S3-based Data Access Object (DAO) for managing short URL mappings

    Attributes (see S3ClientMixin):
        bucket (str):
            Bucket holding one object per short code.

    Methods:
        write(short_url: ShortURLModel, **kwargs) -> ShortURLS3DAO:
            Put the long URL as the body of the object named after the shortcode.
            Overwrites an existing object unconditionally.
            Raises DataStoreError on any S3 or client failure.

        read(shortcode: str, **kwargs) -> ShortURLModel:
            Get the object named after the shortcode and return its body as the target.
            Raises ShortURLNotFoundError when the object doesn't exist.
            Raises DataStoreError on any other S3 or client failure.
    """

    @handle_s3_client_error
    @beartype
    def write(self, short_url: ShortURLModel, **kwargs) -> 'ShortURLS3DAO':
        """Put a short URL mapping into the bucket

        Args:
            short_url (ShortURLModel):
                ShortURLModel instance representing the shortened URL mapping.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            ShortURLS3DAO: self (for method chaining)

        Raises:
            DataStoreError:
                If the client can't be created or S3 rejects the request.
        """
        with self.s3() as client:
            client.put_object(Bucket=self.bucket, Key=short_url.shortcode, Body=short_url.target.encode('utf-8', 'surrogateescape'))
        return self

    @handle_s3_client_error
    @beartype
    def read(self, shortcode: str, **kwargs) -> ShortURLModel:
        """Get a stored short URL mapping by shortcode

        Args:
            shortcode (str):
                The shortcode identifier for the shortened URL.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            ShortURLModel: the stored mapping.

        Raises:
            ShortURLNotFoundError:
                If no object exists under the shortcode.
            DataStoreError:
                If the client can't be created or S3 rejects the request.
        """
        with self.s3() as client:
            response = client.get_object(Bucket=self.bucket, Key=shortcode)
            with closing(response['Body']) as body:
                target = body.read().decode('utf-8', 'surrogateescape')

        return ShortURLModel(target=target, shortcode=shortcode)
