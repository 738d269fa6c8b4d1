"""Pytest configuration and fixtures."""

import fnmatch
import pickle

import pytest
import redis

from rbr.connection import StoreConnection


class FakeRedis:
    """In-memory stand-in for the parts of redis.Redis that rbr uses.

    DUMP payloads are pickled ``(type, value)`` pairs.
    """

    def __init__(self):
        self.data = {}
        self.ttls = {}
        self.types = {}
        self.fail_on = {}
        self.calls = []
        self.closed = False

    def _check(self, command, key=None):
        self.calls.append((command, key))
        if (command, key) in self.fail_on:
            raise self.fail_on[(command, key)]

    def set(self, key, value, type_="string", px=None):
        key = key.encode() if isinstance(key, str) else key
        self.data[key] = value
        self.types[key] = type_
        if px is not None:
            self.ttls[key] = px
        else:
            self.ttls.pop(key, None)

    def ping(self):
        self._check("PING")
        return True

    def keys(self, pattern="*"):
        self._check("KEYS")
        return [k for k in self.data if fnmatch.fnmatchcase(k.decode(), pattern)]

    def type(self, key):
        self._check("TYPE", key)
        return self.types.get(key, "none").encode()

    def pttl(self, key):
        self._check("PTTL", key)
        if key not in self.data:
            return -2
        return self.ttls.get(key, -1)

    def dump(self, key):
        self._check("DUMP", key)
        if key not in self.data:
            return None
        return pickle.dumps((self.types[key], self.data[key]))

    def restore(self, name, ttl, value, replace=False):
        self._check("RESTORE", name)
        if name in self.data and not replace:
            raise redis.exceptions.ResponseError("BUSYKEY Target key name already exists.")
        try:
            type_, data = pickle.loads(value)
        except Exception:
            raise redis.exceptions.ResponseError("DUMP payload version or checksum are wrong")
        self.set(name, data, type_, px=ttl or None)
        return b"OK"

    def delete(self, *names):
        self._check("DEL", names[0])
        removed = 0
        for name in names:
            if name in self.data:
                del self.data[name]
                removed += 1
            self.types.pop(name, None)
            self.ttls.pop(name, None)
        return removed

    def get(self, key):
        self._check("GET", key)
        return self.data.get(key)

    def hgetall(self, key):
        self._check("HGETALL", key)
        return dict(self.data.get(key, {}))

    def hmget(self, key, fields):
        self._check("HMGET", key)
        mapping = self.data.get(key, {})
        return [mapping.get(f) for f in fields]

    def lrange(self, key, start, end):
        self._check("LRANGE", key)
        return list(self.data.get(key, []))

    def smembers(self, key):
        self._check("SMEMBERS", key)
        return set(self.data.get(key, set()))

    def zrange(self, key, start, end):
        self._check("ZRANGE", key)
        return list(self.data.get(key, []))

    def close(self):
        self.closed = True

    def snapshot(self):
        return dict(self.data), dict(self.ttls), dict(self.types)


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def conn(fake_redis):
    """StoreConnection wired to the fake client."""
    return StoreConnection(client=fake_redis)
