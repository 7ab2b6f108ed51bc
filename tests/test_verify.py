# tests/test_verify.py
from dataclasses import replace

import pytest

from provn.core.types import Claim, SignedClaim
from provn.core.errors import KeyFormatError, SerializationError
from provn.crypto.keys import ClaimKeyPair
from provn.verify.verifier import ClaimVerifier, VerificationResult, verify_claim


@pytest.fixture
def zero_key():
    return ClaimKeyPair.from_seed(bytes(32))


@pytest.fixture
def signed_hello(zero_key):
    return zero_key.sign_claim(Claim(data="Hello World", timestamp=123456789))


def create_signed_batch(n_claims=4):
    keys = [ClaimKeyPair.generate() for _ in range(2)]
    batch = [
        keys[i % 2].sign_claim(Claim(data=f"Claim #{i}", timestamp=1700000000 + i, metadata=f"batch:{i}"))
        for i in range(n_claims)
    ]
    return batch, keys


def test_sign_verify_flow(signed_hello):
    assert verify_claim(signed_hello) is True


def test_verify_after_json_transport(signed_hello):
    received = SignedClaim.from_json(signed_hello.to_json(indent=2))
    assert verify_claim(received) is True


def test_roundtrip_random_keys():
    for _ in range(5):
        key = ClaimKeyPair.generate()
        claim = Claim.new("AI Model v1.0 Accuracy: 98%", metadata="eval-run")
        assert verify_claim(key.sign_claim(claim))


def test_flipping_data_character_fails(signed_hello):
    tampered = replace(signed_hello, claim=replace(signed_hello.claim, data="Hello Worle"))
    assert verify_claim(tampered) is False


@pytest.mark.parametrize(
    "changes",
    [
        {"data": "Tampered Data"},
        {"timestamp": 123456790},
        {"metadata": "added later"},
        {"metadata": ""},
    ],
)
def test_tamper_any_field(signed_hello, changes):
    tampered = replace(signed_hello, claim=replace(signed_hello.claim, **changes))
    assert verify_claim(tampered) is False


def test_tamper_removing_metadata(zero_key):
    signed = zero_key.sign_claim(Claim(data="x", timestamp=1, metadata="context"))
    tampered = replace(signed, claim=replace(signed.claim, metadata=None))
    assert verify_claim(tampered) is False


def test_key_mismatch(signed_hello):
    other = ClaimKeyPair.generate()
    swapped = replace(signed_hello, public_key=other.public_key_hex())
    assert verify_claim(swapped) is False


@pytest.mark.parametrize("public_key", ["ff" * 32, "ec" + "ff" * 30 + "7f"])
def test_off_curve_public_key_is_a_mismatch(signed_hello, public_key):
    assert verify_claim(replace(signed_hello, public_key=public_key)) is False


def test_signature_bit_flip(signed_hello):
    first = signed_hello.signature[0]
    flipped = ("1" if first == "0" else "0") + signed_hello.signature[1:]
    assert verify_claim(replace(signed_hello, signature=flipped)) is False


def test_uppercase_hex_still_verifies(signed_hello):
    upper = replace(signed_hello, public_key=signed_hello.public_key.upper(),
                    signature=signed_hello.signature.upper())
    assert verify_claim(upper) is True


@pytest.mark.parametrize("public_key", ["00" * 31, "zz" * 32, "abc", ""])
def test_malformed_public_key(signed_hello, public_key):
    with pytest.raises(KeyFormatError, match="Public Key"):
        verify_claim(replace(signed_hello, public_key=public_key))


@pytest.mark.parametrize("signature", ["00" * 63, "00" * 32, "gg" * 64, "0" * 127])
def test_malformed_signature(signed_hello, signature):
    with pytest.raises(KeyFormatError, match="Signature"):
        verify_claim(replace(signed_hello, signature=signature))


def test_public_key_checked_before_signature(signed_hello):
    both_bad = replace(signed_hello, public_key="xx", signature="yy")
    with pytest.raises(KeyFormatError, match="Public Key"):
        verify_claim(both_bad)


def test_unserializable_claim(signed_hello):
    broken = replace(signed_hello, claim=replace(signed_hello.claim, timestamp=-5))
    with pytest.raises(SerializationError):
        verify_claim(broken)


# --- batch verifier ----------------------------------------------------------

def test_valid_batch():
    batch, _ = create_signed_batch(6)
    result = ClaimVerifier().verify(batch)
    assert result.is_valid is True
    assert bool(result) is True
    assert result.checked == 6
    assert len(result.failures) == 0


def test_empty_batch():
    result = ClaimVerifier().verify([])
    assert result.is_valid is True
    assert result.message == "Nothing to verify"


def test_batch_collects_every_failure():
    batch, _ = create_signed_batch(5)
    tampered = batch.copy()
    tampered[1] = replace(tampered[1], claim=replace(tampered[1].claim, data="HACKED CONTENT"))
    tampered[3] = replace(tampered[3], signature="not-hex")

    result = ClaimVerifier().verify(tampered)
    assert result.is_valid is False
    assert result.failed_indices() == [1, 3]
    assert result.first_failure.category == "signature"
    assert result.failures[1].category == "key"
    assert str(result).startswith("2 of 5 claim(s) rejected:")
    assert [f.index for f in result.by_category("key")] == [3]


def test_batch_trusted_keys():
    batch, keys = create_signed_batch(4)
    verifier = ClaimVerifier(trusted_keys=[keys[0].public_key_hex().upper()])
    result = verifier.verify(batch)

    assert result.is_valid is False
    assert result.failed_indices() == [1, 3]
    assert all(f.category == "untrusted_key" for f in result.failures)
    assert len(result.by_category("untrusted_key")) == 2


def test_trusted_keys_must_not_be_empty():
    with pytest.raises(ValueError):
        ClaimVerifier(trusted_keys=[])


def test_result_str_when_valid():
    assert "valid" in str(VerificationResult(True, checked=2))
