"""Write selected keys to a dump file."""

import logging
import os
import tempfile

from rbr.codec import KeyRecord, encode_header, encode_record

logger = logging.getLogger(__name__)


def dump_key(conn, key: bytes) -> KeyRecord:
    """Fetch one key's remaining TTL and serialized value."""
    ttl = conn.pttl(key)
    # -1 is no expiry, -2 is missing; both are stored as 0.
    if ttl < 0:
        ttl = 0
    value = conn.dump(key)
    return KeyRecord(key=key, value=value, ttl=ttl)


def dump_keys(conn, keys, writer) -> int:
    """Write a header and one record per key. Returns bytes written.

    Any store error aborts the whole dump.
    """
    keys = list(keys)
    header = encode_header(len(keys))
    writer.write(header)
    total = len(header)
    for key in keys:
        data = encode_record(dump_key(conn, key))
        writer.write(data)
        total += len(data)
        logger.debug("Dumped %r (%d bytes)", key, len(data))
    logger.info("Dumped %d keys, %d bytes", len(keys), total)
    return total


def dump_to_file(conn, keys, path) -> int:
    """Dump into a sibling temp file, then move it over ``path``.

    An existing file at ``path`` is only replaced by a complete dump.
    """
    path = os.fspath(path)
    fd, tmp = tempfile.mkstemp(prefix=".rbr-", suffix=".tmp",
                               dir=os.path.dirname(path) or ".")
    try:
        with os.fdopen(fd, "wb") as f:
            size = dump_keys(conn, keys, f)
        os.replace(tmp, path)
    except BaseException:
        if os.path.exists(tmp):
            os.remove(tmp)
        raise
    return size
