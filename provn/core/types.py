# provn/core/types.py
import json
import time
from dataclasses import dataclass
from typing import IO, Any, Iterable, List, Optional

from provn.core.errors import SerializationError

CLAIM_KEYS = frozenset({"data", "metadata", "timestamp"})
SIGNED_CLAIM_KEYS = frozenset({"claim", "public_key", "signature"})
MAX_TIMESTAMP = 2 ** 64 - 1


def _require_object(obj: Any, what: str) -> dict:
    if not isinstance(obj, dict):
        raise SerializationError(f"{what} must be a JSON object, got {type(obj).__name__}")
    return obj


def _check_keys(obj: dict, allowed: frozenset, required: frozenset, what: str) -> None:
    unknown = set(obj) - allowed
    if unknown:
        raise SerializationError(f"Unknown {what} field(s): {', '.join(sorted(unknown))}")
    missing = required - set(obj)
    if missing:
        raise SerializationError(f"Missing {what} field(s): {', '.join(sorted(missing))}")


@dataclass(frozen=True)
class Claim:
    """A timestamped statement of truth to be signed."""
    data: str                       # free text, or a hash of external content
    timestamp: int                  # UTC seconds since epoch
    metadata: Optional[str] = None  # omitted from every serialized form when None

    @classmethod
    def new(cls, data: str, metadata: Optional[str] = None) -> "Claim":
        """Create a claim stamped with the current UTC time (whole seconds)."""
        return cls(data=data, timestamp=int(time.time()), metadata=metadata)

    def to_dict(self) -> dict:
        d = {"data": self.data}
        if self.metadata is not None:
            d["metadata"] = self.metadata
        d["timestamp"] = self.timestamp
        return d

    @classmethod
    def from_dict(cls, obj: Any) -> "Claim":
        obj = _require_object(obj, "claim")
        _check_keys(obj, CLAIM_KEYS, CLAIM_KEYS - {"metadata"}, "claim")

        data = obj["data"]
        metadata = obj.get("metadata")
        timestamp = obj["timestamp"]

        if not isinstance(data, str):
            raise SerializationError("claim.data must be a string")
        if metadata is not None and not isinstance(metadata, str):
            raise SerializationError("claim.metadata must be a string when present")
        if isinstance(timestamp, bool) or not isinstance(timestamp, int) or not 0 <= timestamp <= MAX_TIMESTAMP:
            raise SerializationError("claim.timestamp must be an unsigned integer")

        return cls(data=data, timestamp=timestamp, metadata=metadata)


@dataclass(frozen=True)
class SignedClaim:
    """A claim bundled with the signer's public key and signature (both hex)."""
    claim: Claim
    public_key: str     # 64 hex chars (32-byte Ed25519 public key)
    signature: str      # 128 hex chars (64-byte Ed25519 signature)

    def to_dict(self) -> dict:
        return {
            "claim": self.claim.to_dict(),
            "public_key": self.public_key,
            "signature": self.signature,
        }

    @classmethod
    def from_dict(cls, obj: Any) -> "SignedClaim":
        obj = _require_object(obj, "signed claim")
        _check_keys(obj, SIGNED_CLAIM_KEYS, SIGNED_CLAIM_KEYS, "signed claim")

        for name in ("public_key", "signature"):
            if not isinstance(obj[name], str):
                raise SerializationError(f"{name} must be a string")

        return cls(
            claim=Claim.from_dict(obj["claim"]),
            public_key=obj["public_key"],
            signature=obj["signature"],
        )

    def to_json(self, indent: Optional[int] = None) -> str:
        """Interchange form for storage/transport. Not the signing form."""
        separators = (",", ":") if indent is None else (",", ": ")
        try:
            return json.dumps(self.to_dict(), indent=indent, separators=separators, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise SerializationError(str(e)) from e

    @classmethod
    def from_json(cls, text: str) -> "SignedClaim":
        try:
            obj = json.loads(text)
        except (TypeError, ValueError) as e:
            raise SerializationError(f"Malformed signed claim JSON: {e}") from e
        return cls.from_dict(obj)


def dump_jsonl(signed_claims: Iterable[SignedClaim], fp: IO[str]) -> int:
    """Write one compact signed claim per line. Returns the number written."""
    count = 0
    for sc in signed_claims:
        fp.write(sc.to_json())
        fp.write("\n")
        count += 1
    return count


def load_jsonl(fp: IO[str]) -> List[SignedClaim]:
    """Read signed claims written by dump_jsonl; blank lines are skipped."""
    loaded = []
    for lineno, line in enumerate(fp, start=1):
        if not line.strip():
            continue
        try:
            loaded.append(SignedClaim.from_json(line))
        except SerializationError as e:
            raise SerializationError(f"line {lineno}: {e.message}") from e
    return loaded
