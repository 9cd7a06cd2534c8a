"""
Тесты RedisUserDataStore на фейковом клиенте.

FakeRedis повторяет нужную часть API redis-py (decode_responses=True).
"""
import pytest
import redis

from botstate.errors import StoreError
from botstate.storage.redis_store import RedisUserDataStore


class FakePipeline:
    """Копит команды и применяет их разом на execute(), как MULTI/EXEC."""

    def __init__(self, client, transaction):
        self.client = client
        self.transaction = transaction
        self.commands = []

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.commands = []
        return False

    def hset(self, *args, **kwargs):
        self.commands.append(("hset", args, kwargs))
        return self

    def expire(self, *args, **kwargs):
        self.commands.append(("expire", args, kwargs))
        return self

    def execute(self):
        if self.client.fail_on_execute:
            raise redis.ConnectionError("Connection lost during EXEC")
        self.client.transactions.append([name for name, _, _ in self.commands])
        return [getattr(self.client, name)(*args, **kwargs) for name, args, kwargs in self.commands]


class FakeRedis:
    def __init__(self):
        self.hashes: dict[str, dict[str, str]] = {}
        self.ttls: dict[str, int] = {}
        self.transactions: list[list[str]] = []
        self.fail_on_execute = False

    def pipeline(self, transaction=True):
        assert transaction is True
        return FakePipeline(self, transaction)

    def hget(self, name, key):
        return self.hashes.get(name, {}).get(key)

    def hset(self, name, key=None, value=None, mapping=None):
        target = self.hashes.setdefault(name, {})
        if key is not None:
            target[key] = value
        if mapping:
            target.update(mapping)
        return len(mapping or {}) + (1 if key is not None else 0)

    def hgetall(self, name):
        return dict(self.hashes.get(name, {}))

    def expire(self, name, seconds):
        self.ttls[name] = seconds
        return True

    def delete(self, *names):
        removed = 0
        for name in names:
            if self.hashes.pop(name, None) is not None:
                removed += 1
        return removed


class BrokenRedis:
    def __getattr__(self, name):
        def _fail(*args, **kwargs):
            raise redis.ConnectionError("Connection refused")
        return _fail


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def redis_store(fake_redis):
    return RedisUserDataStore(client=fake_redis, prefix="test:user", ttl_seconds=0)


def test_state_fields_roundtrip(redis_store, fake_redis):
    redis_store.set_current_state("7", "start")
    redis_store.set_state_with_callback("7", "ask")

    assert redis_store.get_current_state("7") == "start"
    assert redis_store.get_state_with_callback("7") == "ask"
    assert fake_redis.hashes["test:user:7"] == {"current_state": "start", "state_with_callback": "ask"}


def test_missing_values_are_empty(redis_store):
    assert redis_store.get_current_state("7") == ""
    assert redis_store.get_state_with_callback("7") == ""
    assert redis_store.get_field("7", "name") == ""
    assert redis_store.get_data("7") == {}


def test_data_kept_apart_from_state(redis_store, fake_redis):
    redis_store.set_current_state("7", "start")
    redis_store.set_data("7", {"current_state": "spoofed", "name": "Bob"})

    assert redis_store.get_current_state("7") == "start"
    assert redis_store.get_field("7", "name") == "Bob"
    assert redis_store.get_data("7") == {"current_state": "spoofed", "name": "Bob"}
    assert "test:user:7:data" in fake_redis.hashes


def test_empty_set_data_is_noop(redis_store, fake_redis):
    redis_store.set_data("7", {})

    assert fake_redis.hashes == {}


def test_ttl_applied_on_write(fake_redis):
    store = RedisUserDataStore(client=fake_redis, prefix="test:user", ttl_seconds=60)

    store.set_current_state("7", "start")
    store.set_data("7", {"a": "1"})

    assert fake_redis.ttls == {"test:user:7": 60, "test:user:7:data": 60}
    # hset и expire уходят в одной транзакции
    assert fake_redis.transactions == [["hset", "expire"], ["hset", "expire"]]


def test_failed_transaction_writes_nothing(fake_redis):
    store = RedisUserDataStore(client=fake_redis, prefix="test:user", ttl_seconds=60)
    fake_redis.fail_on_execute = True

    with pytest.raises(StoreError):
        store.set_current_state("7", "start")

    assert fake_redis.hashes == {}
    assert fake_redis.ttls == {}


def test_no_ttl_when_disabled(redis_store, fake_redis):
    redis_store.set_current_state("7", "start")

    assert fake_redis.ttls == {}


def test_reset_deletes_both_keys(redis_store, fake_redis):
    redis_store.set_current_state("7", "start")
    redis_store.set_data("7", {"a": "1"})

    redis_store.reset("7")

    assert fake_redis.hashes == {}


@pytest.mark.parametrize(
    "call",
    [
        lambda s: s.get_current_state("7"),
        lambda s: s.set_current_state("7", "x"),
        lambda s: s.get_state_with_callback("7"),
        lambda s: s.set_state_with_callback("7", "x"),
        lambda s: s.set_data("7", {"a": "1"}),
        lambda s: s.get_field("7", "a"),
        lambda s: s.get_data("7"),
        lambda s: s.reset("7"),
    ],
)
def test_redis_errors_become_store_errors(call):
    store = RedisUserDataStore(client=BrokenRedis(), prefix="test:user", ttl_seconds=0)

    with pytest.raises(StoreError) as exc_info:
        call(store)

    assert isinstance(exc_info.value.__cause__, redis.ConnectionError)
