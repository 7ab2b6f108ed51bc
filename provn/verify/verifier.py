# provn/verify/verifier.py
import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from provn.core.canon import canonical_json
from provn.core.encoding import decode_public_key, decode_signature
from provn.core.errors import ProvnError
from provn.core.types import SignedClaim
from provn.crypto.keys import ClaimKeyPair

logger = logging.getLogger(__name__)


def verify_claim(signed_claim: SignedClaim) -> bool:
    """
    Verify a signed claim using nothing but its own contents.

    Returns False when the signature does not match the claim (tampering,
    wrong key, a public key that is not a curve point). Raises KeyFormatError
    for malformed public key / signature text and SerializationError when
    the claim cannot be canonicalized.
    """
    # 1. Decode public key
    pk_bytes = decode_public_key(signed_claim.public_key)

    # 2. Decode signature
    sig_bytes = decode_signature(signed_claim.signature)

    # 3. Reconstruct signable bytes from the embedded claim
    msg_bytes = canonical_json(signed_claim.claim)

    # 4. Verify
    verifier = ClaimKeyPair.from_public_bytes(pk_bytes)
    return verifier.verify_bytes(sig_bytes, msg_bytes)


@dataclass
class VerificationFailure:
    index: int
    message: str
    category: str = "signature"  # "key", "signature", "serialization", "untrusted_key"


@dataclass
class VerificationResult:
    """Outcome of a batch check; falsy when any claim was rejected."""
    is_valid: bool
    message: str = ""
    failures: List[VerificationFailure] = field(default_factory=list)
    checked: int = 0

    @property
    def first_failure(self) -> Optional[VerificationFailure]:
        return next(iter(self.failures), None)

    def failed_indices(self) -> List[int]:
        return sorted({f.index for f in self.failures})

    def by_category(self, category: str) -> List[VerificationFailure]:
        return [f for f in self.failures if f.category == category]

    def __bool__(self):
        return self.is_valid

    def __str__(self):
        if self.is_valid:
            return f"All {self.checked} claim(s) valid ✓"
        rejected = len(self.failed_indices())
        header = f"{rejected} of {self.checked} claim(s) rejected:"
        return "\n".join([header] + [f"  #{f.index} {f.category}: {f.message}" for f in self.failures])


class ClaimVerifier:
    """
    Offline verifier for a batch of signed claims.
    Optionally restricted to an allow-list of public keys (hex); this pins
    which keys are accepted, it says nothing about who owns them.
    """

    def __init__(self, trusted_keys: Optional[Iterable[str]] = None):
        self.trusted_keys = None
        if trusted_keys is not None:
            self.trusted_keys = {k.lower() for k in trusted_keys}
            if not self.trusted_keys:
                raise ValueError("trusted_keys, when given, must not be empty")

    def check(self, index: int, signed_claim: SignedClaim) -> Optional[VerificationFailure]:
        """Verify one claim; returns the failure or None when it is valid."""
        try:
            ok = verify_claim(signed_claim)
        except ProvnError as e:
            return VerificationFailure(index, str(e), e.kind)

        if not ok:
            return VerificationFailure(index, "Invalid signature: claim or key does not match", "signature")

        if self.trusted_keys is not None and signed_claim.public_key.lower() not in self.trusted_keys:
            return VerificationFailure(
                index, f"Public key {signed_claim.public_key} is not trusted", "untrusted_key"
            )
        return None

    def verify(self, signed_claims: Iterable[SignedClaim]) -> VerificationResult:
        """Verify every claim and collect all failures (does not stop at the first)."""
        result = VerificationResult(True)

        for i, sc in enumerate(signed_claims):
            result.checked += 1
            failure = self.check(i, sc)
            if failure is not None:
                logger.debug("claim %d rejected (%s): %s", i, failure.category, failure.message)
                result.failures.append(failure)
                result.is_valid = False

        if result.checked == 0:
            result.message = "Nothing to verify"
        elif result.is_valid:
            result.message = f"{result.checked} claim(s) valid"
        else:
            result.message = f"Failed with {len(result.failures)} issues"
        return result
