# provn/crypto/keys.py
from typing import Optional

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey, Ed25519PublicKey

from provn.core.canon import canonical_json
from provn.core.encoding import (
    PUBLIC_KEY_LENGTH,
    SEED_LENGTH,
    decode_public_key,
    decode_seed,
    hex_encode,
)
from provn.core.errors import KeyFormatError, SignatureError
from provn.core.types import Claim, SignedClaim


class ClaimKeyPair:
    """
    Ed25519 signing identity for claims.
    Holds the private half when built from a seed or generated; verify-only
    instances (from_public_hex) carry just the public half.
    """

    def __init__(self, public_key: Ed25519PublicKey, private_key: Optional[Ed25519PrivateKey] = None):
        self._private_key = private_key
        self._public_key = public_key

    @classmethod
    def generate(cls) -> "ClaimKeyPair":
        """New random key from the OS CSPRNG."""
        private_key = Ed25519PrivateKey.generate()
        return cls(private_key.public_key(), private_key)

    @classmethod
    def from_seed(cls, seed: bytes) -> "ClaimKeyPair":
        """Deterministic key from a 32-byte seed (RFC 8032 secret key)."""
        if not isinstance(seed, (bytes, bytearray)) or len(seed) != SEED_LENGTH:
            raise KeyFormatError(f"Invalid Seed Length: expected {SEED_LENGTH} bytes")
        private_key = Ed25519PrivateKey.from_private_bytes(bytes(seed))
        return cls(private_key.public_key(), private_key)

    @classmethod
    def from_seed_hex(cls, text: str) -> "ClaimKeyPair":
        return cls.from_seed(decode_seed(text))

    @classmethod
    def from_public_bytes(cls, raw: bytes) -> "ClaimKeyPair":
        if len(raw) != PUBLIC_KEY_LENGTH:
            raise KeyFormatError(f"Invalid Public Key Length: expected {PUBLIC_KEY_LENGTH} bytes, got {len(raw)}")
        # the point is not validated here; an off-curve key simply never verifies
        return cls(Ed25519PublicKey.from_public_bytes(raw))

    @classmethod
    def from_public_hex(cls, text: str) -> "ClaimKeyPair":
        """Verify-only key pair from a hex public key."""
        return cls.from_public_bytes(decode_public_key(text))

    @property
    def can_sign(self) -> bool:
        return self._private_key is not None

    def public_key_bytes(self) -> bytes:
        return self._public_key.public_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PublicFormat.Raw,
        )

    def public_key_hex(self) -> str:
        return hex_encode(self.public_key_bytes())

    def seed_hex(self) -> str:
        """Hex of the 32-byte private seed. Treat the result as a secret."""
        if self._private_key is None:
            raise SignatureError("verify-only key pair has no private seed")
        raw = self._private_key.private_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PrivateFormat.Raw,
            encryption_algorithm=serialization.NoEncryption(),
        )
        return hex_encode(raw)

    def sign_bytes(self, data: bytes) -> bytes:
        if self._private_key is None:
            raise SignatureError("cannot sign with a verify-only key pair")
        try:
            return self._private_key.sign(data)
        except (TypeError, ValueError) as e:
            raise SignatureError(str(e)) from e

    def verify_bytes(self, signature: bytes, data: bytes) -> bool:
        try:
            self._public_key.verify(signature, data)
        except InvalidSignature:
            return False
        return True

    def sign_claim(self, claim: Claim) -> SignedClaim:
        """Canonicalize → sign → embed claim, public key and signature (hex)."""
        signature = self.sign_bytes(canonical_json(claim))
        return SignedClaim(
            claim=claim,
            public_key=self.public_key_hex(),
            signature=hex_encode(signature),
        )

    def __repr__(self):
        mode = "signing" if self.can_sign else "verify-only"
        return f"ClaimKeyPair({mode}, public_key={self.public_key_hex()})"


def generate_keypair() -> ClaimKeyPair:
    return ClaimKeyPair.generate()


def sign_claim(claim: Claim, key: ClaimKeyPair) -> SignedClaim:
    """Sign a claim with a private key. Pure: no I/O, inputs untouched."""
    return key.sign_claim(claim)
