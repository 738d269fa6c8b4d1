"""Connection settings."""

import os
from dataclasses import dataclass, replace

from rbr.errors import ConfigError

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 6379


def _env_int(env, name, default):
    value = env.get(name)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {value!r}") from None


@dataclass
class ConnectionConfig:
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    password: str | None = None
    db: int = 0
    socket_timeout: float | None = None

    @classmethod
    def from_env(cls, environ=None) -> "ConnectionConfig":
        """Build a config from RBR_HOST, RBR_PORT, RBR_AUTH and RBR_DB."""
        env = os.environ if environ is None else environ
        return cls(
            host=env.get("RBR_HOST", DEFAULT_HOST),
            port=_env_int(env, "RBR_PORT", DEFAULT_PORT),
            password=env.get("RBR_AUTH") or None,
            db=_env_int(env, "RBR_DB", 0),
        )

    def override(self, **values) -> "ConnectionConfig":
        """Return a copy with every non-None value applied."""
        merged = {k: v for k, v in values.items() if v is not None}
        return replace(self, **merged)
