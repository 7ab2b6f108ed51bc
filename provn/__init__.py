# provn/__init__.py
"""
Provn: portable, tamper-evident signed claims.
A claim (text data + UTC timestamp + optional metadata) is canonically serialized,
signed with Ed25519 and verifiable offline by anyone holding the public key.
"""

from provn.core.canon import canonical_json, canonical_json_str
from provn.core.errors import KeyFormatError, ProvnError, SerializationError, SignatureError
from provn.core.types import Claim, SignedClaim, dump_jsonl, load_jsonl
from provn.crypto.hashing import claim_hash, compute_hash
from provn.crypto.keys import ClaimKeyPair, generate_keypair, sign_claim
from provn.verify.verifier import ClaimVerifier, VerificationResult, verify_claim

__version__ = "0.1.0-dev"

__all__ = [
    "Claim",
    "SignedClaim",
    "ClaimKeyPair",
    "ClaimVerifier",
    "VerificationResult",
    "canonical_json",
    "canonical_json_str",
    "claim_hash",
    "compute_hash",
    "dump_jsonl",
    "generate_keypair",
    "load_jsonl",
    "sign_claim",
    "verify_claim",
    "ProvnError",
    "SerializationError",
    "SignatureError",
    "KeyFormatError",
]
