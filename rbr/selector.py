"""Key selection: glob query on the store, then an optional regex filter."""

import logging
import re

from rbr.errors import RegexCompileError

logger = logging.getLogger(__name__)


def compile_filter(regex: str):
    """Compile a key filter. Empty means no filtering and returns None."""
    if not regex:
        return None
    try:
        return re.compile(regex)
    except re.error as e:
        raise RegexCompileError(f"invalid regex {regex!r}: {e}") from e


def invertible_match(key: bytes, pattern, invert: bool = False) -> bool:
    if pattern is None:
        return True
    # Undecodable bytes survive as surrogates so binary keys can still match.
    text = key.decode("utf-8", errors="surrogateescape")
    matched = pattern.search(text) is not None
    return not matched if invert else matched


def select_keys(conn, pattern="*", regex="", invert=False):
    """Return ``(keys, count)`` for keys matching ``pattern`` and the filter.

    Keys keep the order the store returned them in.
    """
    compiled = compile_filter(regex)
    found = conn.keys(pattern)
    keys = [k for k in found if invertible_match(k, compiled, invert)]
    logger.info("Selected %d of %d keys matching %r", len(keys), len(found), pattern)
    return keys, len(keys)
