from urlywurly.dao.s3.short_url_s3_dao import ShortURLS3DAO
from urlywurly.dao.s3.mixins import S3ClientMixin


__all__ = [
    'ShortURLS3DAO',
    'S3ClientMixin',
]
