import pytest

from urlywurly.constants import StoreBackend
from urlywurly.dao.memory import ShortURLMemoryDAO
from urlywurly.utils.config import Settings


@pytest.fixture
def settings() -> Settings:
    return Settings(domain='urly.test', bucket='urly-test-links', store_backend=StoreBackend.MEMORY)


@pytest.fixture
def memory_dao() -> ShortURLMemoryDAO:
    return ShortURLMemoryDAO()
