"""Single reusable connection to the store.

``StoreConnection`` is the only place that talks to redis-py. Every other
module receives a connection explicitly and only ever sees rbr exceptions.
"""

import logging

import redis

from rbr.config import ConnectionConfig
from rbr.errors import StoreCommandError, StoreConnectionError

logger = logging.getLogger(__name__)


class StoreConnection:
    """Lazily established, authenticated connection reused across calls."""

    def __init__(self, config: ConnectionConfig | None = None, client=None):
        self.config = config or ConnectionConfig()
        self._client = client

    @property
    def client(self) -> redis.Redis:
        if self._client is None:
            cfg = self.config
            logger.debug("Connecting to %s:%d db=%d", cfg.host, cfg.port, cfg.db)
            client = redis.Redis(
                host=cfg.host,
                port=cfg.port,
                db=cfg.db,
                password=cfg.password,
                socket_timeout=cfg.socket_timeout,
            )
            try:
                # Forces the connection and AUTH before any real command.
                client.ping()
            except redis.exceptions.RedisError as e:
                client.close()
                raise StoreConnectionError(
                    f"cannot connect to {cfg.host}:{cfg.port}: {e}"
                ) from e
            self._client = client
        return self._client

    def _run(self, command, key, fn, *args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError) as e:
            raise StoreConnectionError(f"{command} failed: {e}") from e
        except redis.exceptions.RedisError as e:
            raise StoreCommandError(command, key, str(e)) from e

    def keys(self, pattern: str) -> list[bytes]:
        return self._run("KEYS", None, self.client.keys, pattern)

    def type(self, key: bytes) -> str:
        reply = self._run("TYPE", key, self.client.type, key)
        if isinstance(reply, bytes):
            reply = reply.decode()
        return reply

    def pttl(self, key: bytes) -> int:
        return self._run("PTTL", key, self.client.pttl, key)

    def dump(self, key: bytes) -> bytes:
        value = self._run("DUMP", key, self.client.dump, key)
        if value is None:
            raise StoreCommandError("DUMP", key, "no such key")
        return value

    def restore(self, key: bytes, ttl: int, value: bytes) -> None:
        self._run("RESTORE", key, self.client.restore, key, ttl, value)

    def delete(self, key: bytes) -> int:
        return self._run("DEL", key, self.client.delete, key)

    def read_value(self, key: bytes, key_type: str, fields=None):
        """Fetch a key's value with the read command for its type."""
        cli = self.client
        if key_type == "string":
            return self._run("GET", key, cli.get, key)
        if key_type == "hash":
            if not fields:
                return self._run("HGETALL", key, cli.hgetall, key)
            values = self._run("HMGET", key, cli.hmget, key, fields)
            return dict(zip(fields, values))
        if key_type == "list":
            return self._run("LRANGE", key, cli.lrange, key, 0, -1)
        if key_type == "set":
            return self._run("SMEMBERS", key, cli.smembers, key)
        if key_type == "zset":
            return self._run("ZRANGE", key, cli.zrange, key, 0, -1)
        raise StoreCommandError("TYPE", key, f"unsupported type {key_type!r}")

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()
