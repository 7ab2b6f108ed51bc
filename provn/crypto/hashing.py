# provn/crypto/hashing.py
import hashlib

from provn.core.canon import canonical_json
from provn.core.types import Claim


def compute_hash(data: bytes) -> str:
    """SHA-256 of arbitrary bytes as lowercase hex (64 chars).

    Use it to build a claim's `data` from content that should stay off the record.
    """
    return hashlib.sha256(data).hexdigest()


def claim_hash(claim: Claim) -> str:
    """Stable identifier of a claim: SHA-256 over its canonical bytes."""
    return compute_hash(canonical_json(claim))
