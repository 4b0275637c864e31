#!/usr/bin/env python3
"""
Merkle Proofs CLI

Command-line interface for verifying Merkle membership proofs.
Provides script-friendly commands for leaf hashing, single proof, indexed
proof and multiproof verification, plus the REST API server.

Verification commands exit with status 1 when the proof does not match the
root and with status 3 when the proof data is malformed, so they can gate
shell scripts directly.
"""

import json
import logging
from typing import Optional, List, Dict, Any
import click
from rich.console import Console
from rich.table import Table

from .main import VerificationResult, verify_single, verify_multi, verify_proof_file
from .merkle import MerkleProofError, compute_path, hash_leaf
from .api.root_client import OnchainRootReader, RootSourceError
from .utils import bytes_to_hex, hex_to_bytes, hex_to_digest, hex_list_to_digests

# Configure rich console
console = Console()
logger = logging.getLogger(__name__)

FORMATS = click.Choice(["table", "json", "detailed"])


class MalformedProofException(click.ClickException):
    """Raised for structurally malformed proofs, distinct from an invalid verdict."""
    exit_code = 3


def setup_logging(verbose: bool = False):
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def parse_flags(value: str) -> List[bool]:
    """
    Parse a comma-separated flag list.

    Accepts 1/0, true/false and t/f, e.g. "0,0,1" or "false,false,true".
    """
    flags = []
    for raw in (part.strip().lower() for part in value.split(",") if part.strip()):
        if raw in ("1", "true", "t"):
            flags.append(True)
        elif raw in ("0", "false", "f"):
            flags.append(False)
        else:
            raise click.BadParameter(f"Invalid flag '{raw}', expected 1/0 or true/false")
    return flags


def resolve_root(ctx: click.Context, root: Optional[str], onchain: bool) -> bytes:
    """Return the root from --root, or read it on-chain when --onchain is set."""
    if root is not None:
        return hex_to_digest(root, "root")
    if onchain:
        reader = OnchainRootReader(
            rpc_url=ctx.obj.get("rpc_url"),
            contract_address=ctx.obj.get("contract"),
        )
        return reader.get_root()
    raise click.UsageError("Provide --root or --onchain")


def result_to_dict(result: VerificationResult) -> Dict[str, Any]:
    """Format a verification result for JSON output."""
    metadata = dict(result.metadata)
    return {
        "valid": result.valid,
        "type": metadata.pop("type"),
        "root": bytes_to_hex(result.root),
        "computed_root": bytes_to_hex(result.computed_root),
        "metadata": metadata,
    }


def print_result(
    result: VerificationResult,
    format_output: str = "table",
    path: Optional[List[bytes]] = None,
):
    """Print verification results in various formats."""
    if format_output == "json":
        click.echo(json.dumps(result_to_dict(result), indent=2))
        return

    # Table format (default)
    verdict = "[bold green]VALID[/bold green]" if result.valid else "[bold red]INVALID[/bold red]"
    table = Table(title=f"{result.metadata['type'].title()} Proof Verification")
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Verdict", verdict)
    table.add_row("Root", bytes_to_hex(result.root))
    table.add_row("Computed Root", bytes_to_hex(result.computed_root))

    for key, value in result.metadata.items():
        if key in ("type", "leaves"):
            continue
        table.add_row(key.replace("_", " ").title(), str(value))

    console.print(table)

    if format_output == "detailed":
        if path:
            console.print("\n[bold cyan]Proof Path:[/bold cyan]")
            for i, step in enumerate(path):
                label = "leaf" if i == 0 else f"level {i}"
                console.print(f"  {label:>8}: {bytes_to_hex(step)}")
        if "leaves" in result.metadata:
            console.print("\n[bold cyan]Leaves:[/bold cyan]")
            for i, leaf in enumerate(result.metadata["leaves"]):
                console.print(f"  {i:2d}: {leaf}")


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option("--rpc-url", envvar="MERKLE_RPC_URL", help="JSON-RPC endpoint for on-chain roots")
@click.option("--contract", envvar="MERKLE_ROOT_CONTRACT", help="Contract holding the root")
@click.version_option(package_name="merkle-proofs")
@click.pass_context
def cli(ctx, verbose: bool, rpc_url: Optional[str], contract: Optional[str]):
    """
    Merkle Proofs CLI - Verify Merkle membership proofs.

    Proofs are checked against a root given with --root, or read from the
    configured contract with --onchain.
    """
    setup_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["rpc_url"] = rpc_url
    ctx.obj["contract"] = contract


@cli.command("hash-leaf")
@click.argument("data")
@click.option("--text", is_flag=True, help="Treat DATA as UTF-8 text instead of hex")
def hash_leaf_command(data: str, text: bool):
    """
    Hash leaf data with the leaf domain tag.

    DATA: Hex-encoded leaf data (or text with --text)
    """
    try:
        raw = data.encode("utf-8") if text else hex_to_bytes(data)
    except ValueError as e:
        raise click.ClickException(f"Invalid data: {e}")
    click.echo(bytes_to_hex(hash_leaf(raw)))


@cli.command()
@click.option("--leaf", required=True, help="Leaf digest (32-byte hex)")
@click.option("--proof", "-p", multiple=True, help="Proof digest, repeated from leaf to root")
@click.option("--index", type=int, help="Leaf index; enables position-aware verification")
@click.option("--root", help="Root digest (32-byte hex)")
@click.option("--onchain", is_flag=True, help="Read the root from the configured contract")
@click.option("--format", "format_output", type=FORMATS, default="table", help="Output format")
@click.pass_context
def verify(
    ctx,
    leaf: str,
    proof: List[str],
    index: Optional[int],
    root: Optional[str],
    onchain: bool,
    format_output: str,
):
    """
    Verify a single Merkle proof.

    Without --index siblings are combined commutatively. With --index the
    index parity at each level decides the operand order, so the proof only
    verifies at that position.
    """
    try:
        root_bytes = resolve_root(ctx, root, onchain)
        leaf_bytes = hex_to_digest(leaf, "leaf")
        proof_bytes = hex_list_to_digests(list(proof), "proof")

        result = verify_single(proof_bytes, root_bytes, leaf_bytes, index)
        path = compute_path(proof_bytes, leaf_bytes, index) if format_output == "detailed" else None
    except click.ClickException:
        raise
    except MerkleProofError as e:
        logger.error(f"Error verifying proof: {e}")
        raise MalformedProofException(str(e))
    except (RootSourceError, ValueError) as e:
        logger.error(f"Error verifying proof: {e}")
        raise click.ClickException(str(e))

    print_result(result, format_output, path)
    if not result.valid:
        ctx.exit(1)


@cli.command("verify-multi")
@click.option("--leaf", "-l", "leaves", multiple=True, help="Leaf digest, repeated in multiproof order")
@click.option("--proof", "-p", multiple=True, help="Proof digest, repeated in consumption order")
@click.option("--flags", "flags", default="", help="Comma-separated step flags, e.g. 0,0,1")
@click.option("--root", help="Root digest (32-byte hex)")
@click.option("--onchain", is_flag=True, help="Read the root from the configured contract")
@click.option("--format", "format_output", type=FORMATS, default="table", help="Output format")
@click.pass_context
def verify_multi_command(
    ctx,
    leaves: List[str],
    proof: List[str],
    flags: str,
    root: Optional[str],
    onchain: bool,
    format_output: str,
):
    """
    Verify a Merkle multiproof.

    The number of flags must equal leaves + proof hashes - 1.
    """
    flag_list = parse_flags(flags)
    try:
        root_bytes = resolve_root(ctx, root, onchain)
        leaf_bytes = hex_list_to_digests(list(leaves), "leaves")
        proof_bytes = hex_list_to_digests(list(proof), "proof")

        result = verify_multi(proof_bytes, root_bytes, leaf_bytes, flag_list)
    except click.ClickException:
        raise
    except MerkleProofError as e:
        logger.error(f"Error verifying multiproof: {e}")
        raise MalformedProofException(str(e))
    except (RootSourceError, ValueError) as e:
        logger.error(f"Error verifying multiproof: {e}")
        raise click.ClickException(str(e))

    print_result(result, format_output)
    if not result.valid:
        ctx.exit(1)


@cli.command("verify-file")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("--root", help="Root digest overriding the document's root")
@click.option("--onchain", is_flag=True, help="Read the root from the configured contract")
@click.option("--format", "format_output", type=FORMATS, default="table", help="Output format")
@click.pass_context
def verify_file(ctx, path: str, root: Optional[str], onchain: bool, format_output: str):
    """
    Verify a JSON proof document.

    PATH: JSON file with "type" (single, indexed or multi), "root", and the
    proof fields for that type.
    """
    try:
        root_bytes = resolve_root(ctx, root, onchain) if (root or onchain) else None
        result = verify_proof_file(path, root_bytes)
    except click.ClickException:
        raise
    except MerkleProofError as e:
        logger.error(f"Error verifying {path}: {e}")
        raise MalformedProofException(str(e))
    except (RootSourceError, ValueError, OSError) as e:
        logger.error(f"Error verifying {path}: {e}")
        raise click.ClickException(str(e))

    print_result(result, format_output)
    if not result.valid:
        ctx.exit(1)


@cli.command()
@click.option("--host", default=None, help="Host to bind to")
@click.option("--port", default=None, type=int, help="Port to bind to")
@click.option("--dev", is_flag=True, help="Enable auto-reload")
def serve(host: Optional[str], port: Optional[int], dev: bool):
    """Run the REST API server."""
    from .api.rest_api import run_server

    console.print("[cyan]Starting Merkle Proofs API server[/cyan]")
    run_server(host, port, dev)


def main():
    cli(obj={})


if __name__ == "__main__":
    main()
