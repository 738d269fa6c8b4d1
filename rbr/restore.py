"""Replay a dump file into the store."""

import logging
from dataclasses import dataclass, field

from rbr.codec import decode_header, iter_records
from rbr.errors import StoreCommandError

logger = logging.getLogger(__name__)


@dataclass
class RestoreResult:
    restored: int = 0
    skipped: list[bytes] = field(default_factory=list)
    advertised: int = 0


def restore_record(conn, record, delete_first=False, ignore_errors=False) -> bool:
    """Restore one record. Returns False if it was skipped.

    Delete errors are always fatal; ``ignore_errors`` only covers RESTORE.
    """
    if delete_first:
        conn.delete(record.key)
    try:
        conn.restore(record.key, record.ttl, record.value)
    except StoreCommandError as e:
        if not ignore_errors:
            raise
        logger.warning("Skipping %r: %s", record.key, e.message)
        return False
    return True


def restore_records(conn, reader, delete_first=False, ignore_errors=False) -> RestoreResult:
    """Restore every record until end of stream.

    The header count is advisory; the stream decides how many records exist.
    """
    header = decode_header(reader)
    result = RestoreResult(advertised=header.key_count)
    seen = 0
    for record in iter_records(reader):
        seen += 1
        if restore_record(conn, record, delete_first, ignore_errors):
            result.restored += 1
            logger.debug("Restored %r", record.key)
        else:
            result.skipped.append(record.key)
    if seen != header.key_count:
        logger.warning(
            "Header advertises %d keys but file holds %d records",
            header.key_count, seen,
        )
    logger.info("Restored %d keys, skipped %d", result.restored, len(result.skipped))
    return result


def restore_from_file(conn, path, delete_first=False, ignore_errors=False) -> RestoreResult:
    with open(path, "rb") as f:
        return restore_records(conn, f, delete_first, ignore_errors)
