# provn/cli/main.py
"""
CLI for creating, signing, inspecting and verifying provn claims.
"""

import io
import json
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from provn.core.canon import canonical_json_str
from provn.core.errors import ProvnError, SerializationError
from provn.core.types import Claim, SignedClaim, load_jsonl
from provn.crypto.hashing import claim_hash, compute_hash
from provn.crypto.keys import ClaimKeyPair
from provn.verify.verifier import ClaimVerifier

SIGNING_KEY_ENV = "PROVN_SIGNING_KEY"

app = typer.Typer(
    name="provn",
    help="Sign and independently verify tamper-evident claims (Ed25519)",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)


def get_signing_key(key_flag: Optional[str] = None) -> ClaimKeyPair:
    """Resolve the signing key (hex seed) in this order:
    1. --key flag
    2. PROVN_SIGNING_KEY environment variable
    """
    seed_hex = key_flag or os.environ.get(SIGNING_KEY_ENV)
    if not seed_hex:
        err_console.print("[red]No signing key given.[/]")
        err_console.print(f"  • Pass --key <64 hex chars> or export {SIGNING_KEY_ENV}")
        err_console.print("  • Create one with: provn keygen")
        raise typer.Exit(1)
    try:
        return ClaimKeyPair.from_seed_hex(seed_hex.strip())
    except ProvnError as e:
        err_console.print(f"[red]{escape(str(e))}[/]")
        raise typer.Exit(1)


def load_signed_claims(path: Path) -> List[SignedClaim]:
    """Read one signed claim (plain or pretty JSON) or a JSONL file of them."""
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SerializationError(f"cannot read {path}: {e}") from e

    try:
        return [SignedClaim.from_json(text)]
    except SerializationError:
        # JSONL only when the first record stands on its own line
        lines = [line for line in text.splitlines() if line.strip()]
        if len(lines) <= 1 or not _is_json(lines[0]):
            raise
    return load_jsonl(io.StringIO(text))


def _is_json(text: str) -> bool:
    try:
        json.loads(text)
    except ValueError:
        return False
    return True


def _shorten(text: str, width: int = 48) -> str:
    return text if len(text) <= width else text[: width - 3] + "..."


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Sign and verify claims locally, with no server or network involved."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=err_console, show_path=False)],
        )


@app.command()
def keygen(
    export: bool = typer.Option(False, "--export", help="Print a shell export line for PROVN_SIGNING_KEY"),
):
    """Generate a new Ed25519 key and print its seed and public key."""
    key = ClaimKeyPair.generate()
    if export:
        console.print(f"export {SIGNING_KEY_ENV}={key.seed_hex()}", highlight=False, soft_wrap=True)
        return
    console.print(f"[bold]Public key:[/] ed25519:{key.public_key_hex()}", highlight=False, soft_wrap=True)
    console.print(f"[bold]Seed (secret):[/] {key.seed_hex()}", highlight=False, soft_wrap=True)
    console.print("[yellow]Keep the seed private; provn does not store it anywhere.[/]")


@app.command("hash")
def hash_file(
    path: str = typer.Argument(..., help="File to hash, or '-' for stdin"),
):
    """Print the SHA-256 of a file, usable as claim data."""
    try:
        if path == "-":
            content = sys.stdin.buffer.read()
        else:
            content = Path(path).read_bytes()
    except OSError as e:
        err_console.print(f"[red]Cannot read {path}: {e}[/]")
        raise typer.Exit(2)
    console.print(compute_hash(content), highlight=False)


@app.command()
def sign(
    data: str = typer.Argument(..., help="Claim data (text, or a hash from `provn hash`)"),
    metadata: Optional[str] = typer.Option(None, "--metadata", "-m", help="Optional annotation"),
    timestamp: Optional[int] = typer.Option(
        None, "--timestamp", "-t", min=0, help="UTC seconds (default: now)"
    ),
    key: Optional[str] = typer.Option(None, "--key", help=f"Hex seed (overrides {SIGNING_KEY_ENV})"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write JSON here instead of stdout"),
):
    """Sign a claim and emit the SignedClaim as JSON."""
    signer = get_signing_key(key)

    if timestamp is None:
        claim = Claim.new(data, metadata=metadata)
    else:
        claim = Claim(data=data, timestamp=timestamp, metadata=metadata)

    try:
        signed = signer.sign_claim(claim)
        payload = signed.to_json(indent=2)
    except ProvnError as e:
        err_console.print(f"[red]{escape(str(e))}[/]")
        raise typer.Exit(1)

    if output is None:
        console.print(payload, markup=False, emoji=False, highlight=False, soft_wrap=True)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(payload + "\n", encoding="utf-8")
    console.print(f"[green]Signed claim written to {output}[/]")
    console.print(f"  public key: {signed.public_key}", highlight=False)


@app.command()
def verify(
    path: Path = typer.Argument(..., help="SignedClaim JSON file, or JSONL with one per line"),
    trusted_key: Optional[List[str]] = typer.Option(
        None, "--trusted-key", help="Only accept claims signed by this public key (repeatable)"
    ),
):
    """Verify signed claims offline. Exit code 0 = valid, 1 = invalid, 2 = unreadable."""
    if not path.exists():
        err_console.print(f"[red]File not found: {path}[/]")
        raise typer.Exit(2)

    try:
        claims = load_signed_claims(path)
    except SerializationError as e:
        err_console.print(f"[red]{escape(str(e))}[/]")
        raise typer.Exit(2)

    result = ClaimVerifier(trusted_keys=trusted_key or None).verify(claims)
    failures = {f.index: f for f in result.failures}

    table = Table(title=f"Claims in {path.name}")
    table.add_column("#")
    table.add_column("Timestamp")
    table.add_column("Data")
    table.add_column("Public Key")
    table.add_column("Status")

    for i, sc in enumerate(claims):
        failure = failures.get(i)
        status = "[green]✓ valid[/]" if failure is None else f"[red]✗ {failure.category}[/]"
        table.add_row(str(i), str(sc.claim.timestamp), escape(_shorten(sc.claim.data)), escape(sc.public_key[:16]) + "…", status)

    console.print(table)

    if result.is_valid:
        console.print(f"[green]✓ {result.message}[/]")
        return

    console.print("[red]✗ Verification failed[/]")
    for failure in result.failures:
        console.print(f"  • [{failure.index}] {failure.category}: {failure.message}", markup=False, emoji=False, soft_wrap=True)
    raise typer.Exit(1)


@app.command()
def inspect(
    path: Path = typer.Argument(..., help="SignedClaim JSON file"),
):
    """Show a signed claim's fields and the exact bytes that were signed."""
    try:
        claims = load_signed_claims(path)
    except SerializationError as e:
        err_console.print(f"[red]{escape(str(e))}[/]")
        raise typer.Exit(2)

    for i, sc in enumerate(claims):
        console.print(f"[bold cyan]{i:4d} | {sc.claim.timestamp} | ed25519:{escape(sc.public_key)}[/]", soft_wrap=True)
        console.print(f"  data:      {sc.claim.data}", markup=False, emoji=False, highlight=False, soft_wrap=True)
        if sc.claim.metadata is not None:
            console.print(f"  metadata:  {sc.claim.metadata}", markup=False, emoji=False, highlight=False, soft_wrap=True)
        try:
            console.print(f"  canonical: {canonical_json_str(sc.claim)}", markup=False, emoji=False, highlight=False, soft_wrap=True)
            console.print(f"  hash:      {claim_hash(sc.claim)}", markup=False, highlight=False, soft_wrap=True)
        except SerializationError as e:
            console.print(f"  [red]{escape(str(e))}[/]")
        console.print(f"  signature: {sc.signature}", markup=False, emoji=False, highlight=False, soft_wrap=True)
        console.print("  " + "─" * 90)


if __name__ == "__main__":
    app()
