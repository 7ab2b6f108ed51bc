# examples/forensic_sign.py
# Run with: poetry run python examples/forensic_sign.py
#
# Standard workflow for a self-contained claim:
#   1. create a local signing identity (Ed25519 key pair)
#   2. prepare a statement of truth (raw content stays local, only its hash is claimed)
#   3. sign the claim locally
#   4. verify integrity and authorship without contacting any service

from dataclasses import replace

from provn import Claim, SignedClaim, compute_hash, generate_keypair, sign_claim, verify_claim


if __name__ == "__main__":
    print("--- PROVN ---")

    # 1. Identity
    signing_key = generate_keypair()
    print(f"[1] Identity generated: ed25519:{signing_key.public_key_hex()}")

    # 2. Claim over the hash of sensitive content
    sensitive_data = b"Internal Audit Memo: #1234 - High Priority Security Patch applied."
    asset_hash = compute_hash(sensitive_data)
    claim = Claim.new(asset_hash, metadata="audit-memo")
    print(f'[2] Prepared claim (asset hash): "{asset_hash}"')

    # 3. Sign
    signed = sign_claim(claim, signing_key)
    print(f"[3] Local signature: {signed.signature}")

    # 4. Verify from the transportable JSON form only
    received = SignedClaim.from_json(signed.to_json())
    if verify_claim(received):
        print("[4] Verification: SUCCESS (signature matches claim and key)")
    else:
        print("[4] Verification: FAILED (data tampering detected)")

    # Bonus: any edit to the claim breaks the signature
    forged = replace(received, claim=replace(received.claim, data=compute_hash(b"forged memo")))
    print(f"[5] Tampered copy verifies: {verify_claim(forged)}")
