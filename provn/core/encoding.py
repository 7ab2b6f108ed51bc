# provn/core/encoding.py
import binascii

from provn.core.errors import KeyFormatError

PUBLIC_KEY_LENGTH = 32
SIGNATURE_LENGTH = 64
SEED_LENGTH = 32


def hex_encode(data: bytes) -> str:
    """Encode raw key/signature bytes as lowercase hex."""
    return binascii.hexlify(data).decode("ascii")


def hex_decode(text: str, expected_length: int, label: str = "value") -> bytes:
    """
    Decode hex text into exactly `expected_length` bytes.
    Raises KeyFormatError on bad hex or a length mismatch; never pads or truncates.
    """
    if not isinstance(text, str):
        raise KeyFormatError(f"Invalid Hex {label}: expected str, got {type(text).__name__}")
    try:
        raw = binascii.unhexlify(text.encode("ascii"))
    except (UnicodeEncodeError, binascii.Error, ValueError) as e:
        raise KeyFormatError(f"Invalid Hex {label}: {e}") from e

    if len(raw) != expected_length:
        raise KeyFormatError(
            f"Invalid {label} Length: expected {expected_length} bytes, got {len(raw)}"
        )
    return raw


def decode_public_key(text: str) -> bytes:
    return hex_decode(text, PUBLIC_KEY_LENGTH, "Public Key")


def decode_signature(text: str) -> bytes:
    return hex_decode(text, SIGNATURE_LENGTH, "Signature")


def decode_seed(text: str) -> bytes:
    return hex_decode(text, SEED_LENGTH, "Seed")
