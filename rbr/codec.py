"""Binary dump file format.

Header::

    magic     4 bytes  b"RDMP"
    version   1 byte   1
    keys      u64      advisory record count

Record, repeated until end of stream::

    ttl       i64      milliseconds remaining, 0 for no expiry
    key_len   u64
    key       key_len bytes
    value_len u64
    value     value_len bytes, opaque DUMP payload

All integers are big-endian.
"""

import struct
from dataclasses import dataclass

from rbr.errors import MalformedHeaderError, TruncatedRecordError

MAGIC = b"RDMP"
VERSION = 1

_HEADER = struct.Struct(">4sBQ")
_I64 = struct.Struct(">q")
_U64 = struct.Struct(">Q")

_CHUNK = 1 << 20

HEADER_SIZE = _HEADER.size
RECORD_OVERHEAD = _I64.size + 2 * _U64.size


@dataclass(frozen=True)
class FileHeader:
    magic: bytes
    version: int
    key_count: int


@dataclass(frozen=True)
class KeyRecord:
    key: bytes
    value: bytes
    ttl: int = 0


def record_size(record: KeyRecord) -> int:
    return RECORD_OVERHEAD + len(record.key) + len(record.value)


def encode_header(key_count: int) -> bytes:
    return _HEADER.pack(MAGIC, VERSION, key_count)


def _read_exact(reader, size: int) -> bytes:
    # Declared lengths are untrusted, read in bounded chunks.
    chunks = []
    remaining = size
    while remaining > 0:
        chunk = reader.read(min(remaining, _CHUNK))
        if not chunk:
            break
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def decode_header(reader) -> FileHeader:
    data = _read_exact(reader, HEADER_SIZE)
    if len(data) < HEADER_SIZE:
        raise MalformedHeaderError(
            f"header is {len(data)} bytes, expected {HEADER_SIZE}"
        )
    magic, version, key_count = _HEADER.unpack(data)
    if magic != MAGIC:
        raise MalformedHeaderError(f"bad magic {magic!r}")
    if version != VERSION:
        raise MalformedHeaderError(f"unsupported version {version}")
    return FileHeader(magic, version, key_count)


def encode_record(record: KeyRecord) -> bytes:
    if record.ttl < 0:
        raise ValueError(f"negative ttl {record.ttl}")
    return b"".join((
        _I64.pack(record.ttl),
        _U64.pack(len(record.key)),
        record.key,
        _U64.pack(len(record.value)),
        record.value,
    ))


def _read_field(reader, size: int, what: str) -> bytes:
    data = _read_exact(reader, size)
    if len(data) < size:
        raise TruncatedRecordError(
            f"{what}: expected {size} bytes, got {len(data)}"
        )
    return data


def decode_record(reader) -> KeyRecord | None:
    """Read one record. Returns None at a clean end of stream."""
    head = _read_exact(reader, _I64.size)
    if not head:
        return None
    if len(head) < _I64.size:
        raise TruncatedRecordError(f"ttl: expected {_I64.size} bytes, got {len(head)}")
    (ttl,) = _I64.unpack(head)
    (key_len,) = _U64.unpack(_read_field(reader, _U64.size, "key length"))
    key = _read_field(reader, key_len, "key")
    (value_len,) = _U64.unpack(_read_field(reader, _U64.size, "value length"))
    value = _read_field(reader, value_len, "value")
    return KeyRecord(key=key, value=value, ttl=ttl)


def iter_records(reader):
    while True:
        record = decode_record(reader)
        if record is None:
            return
        yield record
