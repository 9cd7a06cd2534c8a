import pytest

from botstate.storage.factory import create_store
from botstate.storage.memory import InMemoryUserDataStore
from botstate.storage.redis_store import RedisUserDataStore
from botstate.storage.sql_store import SqlUserDataStore


@pytest.mark.parametrize(
    "backend, expected",
    [
        ("memory", InMemoryUserDataStore),
        ("redis", RedisUserDataStore),
        ("postgres", SqlUserDataStore),
    ],
)
def test_create_store_by_backend(backend, expected):
    # клиенты создаются лениво, соединения здесь нет
    assert isinstance(create_store(backend), expected)


def test_create_store_unknown_backend():
    with pytest.raises(ValueError):
        create_store("mongo")
