"""Exceptions raised by rbr."""


class RBRError(Exception):
    """Base exception for rbr."""

    pass


class StoreConnectionError(RBRError):
    """Cannot connect or authenticate to the store."""

    pass


class StoreCommandError(RBRError):
    """The store rejected a command or returned an unusable reply."""

    def __init__(self, command, key=None, message=""):
        self.command = command
        self.key = key
        self.message = message
        if key is None:
            text = f"{command}: {message}"
        else:
            text = f"{command} {key!r}: {message}"
        super().__init__(text)


class DumpFormatError(RBRError):
    """Dump file is structurally invalid."""

    pass


class MalformedHeaderError(DumpFormatError):
    """Dump file header is short or unrecognised."""

    pass


class TruncatedRecordError(DumpFormatError):
    """A record ends before its declared length."""

    pass


class ConfigError(RBRError):
    """Invalid connection settings."""

    pass


class RegexCompileError(RBRError):
    """Key filter regular expression does not compile."""

    pass
