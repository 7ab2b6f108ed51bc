# provn/core/canon.py
import json

from provn.core.errors import SerializationError
from provn.core.types import MAX_TIMESTAMP, Claim


def _json_string(value, name: str) -> str:
    if not isinstance(value, str):
        raise SerializationError(f"claim.{name} must be a string, got {type(value).__name__}")
    # ensure_ascii=False: non-ASCII stays literal, only '"', '\\' and C0 controls are escaped
    return json.dumps(value, ensure_ascii=False)


def _json_unsigned(value, name: str) -> str:
    if isinstance(value, bool) or not isinstance(value, int):
        raise SerializationError(f"claim.{name} must be an integer, got {type(value).__name__}")
    if not 0 <= value <= MAX_TIMESTAMP:
        raise SerializationError(f"claim.{name} out of unsigned 64-bit range: {value}")
    return str(value)


def canonical_json(claim: Claim) -> bytes:
    """
    Produce the exact UTF-8 bytes that get signed for a claim.

    Fields are emitted in the fixed order data, metadata, timestamp with no
    whitespace; metadata is left out entirely when None. This is a fixed-schema
    subset of RFC 8785 (JCS) and must stay byte-stable across releases.
    """
    fields = [("data", _json_string(claim.data, "data"))]
    if claim.metadata is not None:
        fields.append(("metadata", _json_string(claim.metadata, "metadata")))
    fields.append(("timestamp", _json_unsigned(claim.timestamp, "timestamp")))

    text = "{" + ",".join(f'"{name}":{value}' for name, value in fields) + "}"
    try:
        return text.encode("utf-8")
    except UnicodeEncodeError as e:
        raise SerializationError(f"claim is not encodable as UTF-8: {e}") from e


def canonical_json_str(claim: Claim) -> str:
    """Same as above, but returns string (mostly for debugging)."""
    return canonical_json(claim).decode("utf-8")
