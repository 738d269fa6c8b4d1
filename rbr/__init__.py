"""Redis backup and recovery."""

from rbr.codec import FileHeader, KeyRecord
from rbr.config import ConnectionConfig
from rbr.connection import StoreConnection
from rbr.dump import dump_keys, dump_to_file
from rbr.errors import (
    ConfigError,
    DumpFormatError,
    MalformedHeaderError,
    RBRError,
    RegexCompileError,
    StoreCommandError,
    StoreConnectionError,
    TruncatedRecordError,
)
from rbr.restore import RestoreResult, restore_from_file, restore_records
from rbr.selector import select_keys

__version__ = "0.2.0"
