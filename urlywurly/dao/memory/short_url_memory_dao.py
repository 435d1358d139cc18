"""In-memory implementation of ShortURLBaseDAO.

Keeps mappings in a process-local dictionary. Intended for local development
(`STORE_BACKEND=memory`) and tests; nothing survives a restart.
"""

from beartype import beartype

from urlywurly.models import ShortURLModel
from urlywurly.dao.base import ShortURLBaseDAO
from urlywurly.dao.exceptions import ShortURLNotFoundError


class ShortURLMemoryDAO(ShortURLBaseDAO):
    """Dictionary-backed DAO: shortcode -> long URL."""

    def __init__(self, links: dict[str, str] | None = None):
        self.links: dict[str, str] = {} if links is None else links

    @beartype
    def write(self, short_url: ShortURLModel, **kwargs) -> 'ShortURLMemoryDAO':
        self.links[short_url.shortcode] = short_url.target
        return self

    @beartype
    def read(self, shortcode: str, **kwargs) -> ShortURLModel:
        try:
            target = self.links[shortcode]
        except KeyError as e:
            raise ShortURLNotFoundError(f"Short URL with code '{shortcode}' not found.") from e
        return ShortURLModel(target=target, shortcode=shortcode)
