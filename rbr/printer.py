"""Human-readable key inspection."""

import json
import sys


def _text(value):
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value


def _maybe_json(value: str, as_json: bool):
    if not as_json or value is None:
        return value
    try:
        return json.loads(value)
    except ValueError:
        return value


def format_string(value, as_json=False) -> str:
    if value is None:
        return "VAL: (nil)"
    value = _text(value)
    parsed = _maybe_json(value, as_json)
    if as_json and parsed is not value:
        return json.dumps(parsed, indent="\t")
    return f"VAL: {value}"


def format_hash(mapping, as_json=False) -> str:
    out = {}
    for k, v in mapping.items():
        v = _text(v)
        out[_text(k)] = _maybe_json(v, as_json) if v is not None else None
    return json.dumps(out, indent="\t", sort_keys=True)


def format_members(members) -> str:
    return "VAL: [" + " ".join(_text(m) for m in members) + "]"


def format_key(key, key_type, value, as_json=False) -> str:
    lines = [f"KEY: {_text(key)}", f"TYP: {key_type}"]
    if key_type == "string":
        lines.append(format_string(value, as_json))
    elif key_type == "hash":
        lines.append(format_hash(value, as_json))
    elif key_type == "set":
        lines.append(format_members(sorted(value)))
    else:
        lines.append(format_members(value))
    return "\n".join(lines) + "\n"


def print_key(conn, key, fields=None, as_json=False, out=None):
    key_type = conn.type(key)
    if key_type == "hash" and fields:
        fields = [f.encode() if isinstance(f, str) else f for f in fields]
    value = conn.read_value(key, key_type, fields)
    print(format_key(key, key_type, value, as_json), file=out or sys.stdout)
