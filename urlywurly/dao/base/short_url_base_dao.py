"""Abstract base class for ShortURL data access objects (DAOs).

This class establishes a consistent contract for all ShortURL DAO implementations,
regardless of the underlying storage mechanism (e.g., S3, in-memory).

Responsibilities:
    - Provide an interface for writing and reading ShortURLModel objects.
    - Standardize error handling across multiple data store implementations.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from urlywurly.models import ShortURLModel
        >>> from urlywurly.dao.s3 import ShortURLS3DAO

        >>> dao = ShortURLS3DAO(bucket='urly-links')

        >>> short_url = ShortURLModel(
        ...     target="https://example.com/blog/article-123",
        ...     shortcode="yfzne",
        ... )
        >>> dao.write(short_url)

        >>> retrieved = dao.read("yfzne")
        >>> print(retrieved.target)
        https://example.com/blog/article-123
"""

from abc import ABC, abstractmethod

from urlywurly.models import ShortURLModel


class ShortURLBaseDAO(ABC):
    """Interface for ShortURL data access objects (DAOs).

    Methods:
        write(short_url: ShortURLModel, **kwargs) -> ShortURLBaseDAO:
            Persist a ShortURLModel, overwriting any existing entry with the same shortcode.
            Raises DataStoreError on connection or write failure.

        read(shortcode: str, **kwargs) -> ShortURLModel:
            Retrieve a ShortURLModel from the data store by shortcode.
            Raises ShortURLNotFoundError if the entry does not exist.
            Raises DataStoreError on connection or read failure.

    NOTE:
        - Writes are unconditional. The DAO performs no compare-and-swap, callers
          that must not overwrite an entry check for it with read() first.
        - Mappings never expire and the DAO provides no interface to delete them.
    """

    @abstractmethod
    def write(self, short_url: ShortURLModel, **kwargs) -> 'ShortURLBaseDAO':
        """Persist a ShortURLModel in the data store.

        Args:
            short_url (ShortURLModel):
                The ShortURLModel instance to be stored.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            ShortURLBaseDAO: self (for method chaining)

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def read(self, shortcode: str, **kwargs) -> ShortURLModel:
        """Retrieve a ShortURLModel from the data store by its shortcode.

        Args:
            shortcode (str):
                The shortcode of the ShortURLModel to be retrieved.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            ShortURLModel: The stored mapping.

        Raises:
            ShortURLNotFoundError:
                If no ShortURLModel with the given shortcode exists.

            DataStoreError:
                If there is an error in the data store.
        """
        pass
