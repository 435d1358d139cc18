from urlywurly.dao.base import ShortURLBaseDAO
from urlywurly.dao.factory import get_short_url_dao


__all__ = [
    'ShortURLBaseDAO',
    'get_short_url_dao',
]
