#!/usr/bin/env python3
"""
Merkle Tree CLI

Command-line interface for building Merkle trees, appending elements, and
generating and verifying inclusion proofs, locally or against a running
Merkle Tree API server.
"""

import json
import logging
import sys
from typing import IO, Iterable, List, Optional, Tuple

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .api.tree_client import TreeAPIClient, TreeAPIError
from .config import load_settings
from .digest import hash_element
from .models.api_models import ProofResponse, SiblingModel, models_to_proof, proof_to_models
from .proof import verify_proof
from .tree import EmptyInputError, MerkleTree
from .utils.hex_helpers import bytes_to_hex, hex_to_bytes
from .visualize import level_table, proof_table, render_tree

# Configure rich console
console = Console()
logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False):
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else getattr(logging, load_settings().log_level, logging.INFO)
    logging.basicConfig(
        level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def collect_elements(elements: Iterable[str], element_file: Optional[IO[str]]) -> List[str]:
    """
    Gather elements from positional arguments followed by a file.

    The file holds one element per line; blank lines are skipped.
    """
    collected = list(elements)
    if element_file is not None:
        for line in element_file:
            line = line.rstrip("\r\n")
            if line:
                collected.append(line)
    return collected


def build_tree(elements: List[str]) -> MerkleTree:
    try:
        return MerkleTree(elements)
    except EmptyInputError as e:
        raise click.ClickException(f"{e}. Pass elements as arguments or with --file.")


def load_proof(proof_file: IO[str]) -> Tuple[List[SiblingModel], Optional[str]]:
    """
    Read a proof from JSON.

    Accepts either a bare list of steps or an object with a "proof" list
    and an optional "root".
    """
    try:
        data = json.load(proof_file)
    except json.JSONDecodeError as e:
        raise click.ClickException(f"Proof file is not valid JSON: {e}")

    if isinstance(data, list):
        steps, root = data, None
    elif isinstance(data, dict) and isinstance(data.get("proof"), list):
        steps, root = data["proof"], data.get("root")
    else:
        raise click.ClickException("Proof JSON must be a list of steps or an object with a 'proof' list")

    try:
        return [SiblingModel(**step) for step in steps], root
    except (TypeError, ValueError) as e:
        raise click.ClickException(f"Invalid proof step: {e}")


def print_tree_summary(tree: MerkleTree, format_output: str = "table", title: str = "Merkle Tree"):
    """Print tree results in various formats."""
    if format_output == "json":
        output = {
            "leaf_count": len(tree),
            "depth": tree.depth,
            "root": bytes_to_hex(tree.root),
            "leaves": [bytes_to_hex(leaf) for leaf in tree.leaves],
        }
        click.echo(json.dumps(output, indent=2))
        return

    table = Table(title=title)
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Root Hash", tree.root_hex)
    table.add_row("Leaves", str(len(tree)))
    table.add_row("Depth", str(tree.depth))
    console.print(table)

    if format_output == "detailed":
        console.print("\n[bold cyan]Leaves:[/bold cyan]")
        for i, leaf in enumerate(tree.leaves):
            console.print(f"  {i:3d}: {leaf.hex()}")


element_file_option = click.option(
    "--file", "-f", "element_file", type=click.File("r"),
    help="File with one element per line (read after positional elements)",
)
format_option = click.option(
    "--format", "format_output", type=click.Choice(["table", "json", "detailed"]),
    default="table", show_default=True, help="Output format",
)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option("--api-url", envvar="MERKLE_TREE_API_URL", help="Merkle Tree API URL for remote commands")
@click.pass_context
def cli(ctx, verbose: bool, api_url: Optional[str]):
    """
    Merkle Tree CLI - Commit elements to a Merkle root and prove membership.

    Elements are hashed with SHA-256 in the order given. An odd node at any
    level is paired with itself.
    """
    setup_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["api_url"] = api_url


@cli.command()
@click.argument("elements", nargs=-1)
@element_file_option
@format_option
def build(elements: Tuple[str, ...], element_file: Optional[IO[str]], format_output: str):
    """
    Build a tree and print its root.

    ELEMENTS: Elements to commit, in order
    """
    tree = build_tree(collect_elements(elements, element_file))
    print_tree_summary(tree, format_output)


@cli.command()
@click.argument("elements", nargs=-1)
@element_file_option
@click.option("--element", "-e", "new_elements", multiple=True, required=True,
              help="Element to append (repeatable)")
@format_option
def add(elements: Tuple[str, ...], element_file: Optional[IO[str]],
        new_elements: Tuple[str, ...], format_output: str):
    """
    Build a tree, append elements, and print the old and new roots.

    ELEMENTS: Initial elements, in order
    """
    tree = build_tree(collect_elements(elements, element_file))
    old_root = tree.root
    for element in new_elements:
        tree.add_element(element)

    if format_output == "json":
        output = {
            "old_root": bytes_to_hex(old_root),
            "new_root": bytes_to_hex(tree.root),
            "leaf_count": len(tree),
            "added": list(new_elements),
        }
        click.echo(json.dumps(output, indent=2))
        return

    console.print(f"[cyan]Old root:[/cyan] {old_root.hex()}")
    print_tree_summary(tree, format_output, title="Updated Merkle Tree")


@cli.command()
@click.argument("target")
@click.argument("elements", nargs=-1)
@element_file_option
@click.option("--format", "format_output", type=click.Choice(["json", "table"]),
              default="json", show_default=True, help="Output format")
def prove(target: str, elements: Tuple[str, ...], element_file: Optional[IO[str]], format_output: str):
    """
    Generate an inclusion proof for TARGET.

    TARGET: Element to prove

    ELEMENTS: Elements of the tree, in order
    """
    tree = build_tree(collect_elements(elements, element_file))
    proof = tree.generate_proof(target)
    if proof is None:
        raise click.ClickException(f"Element {target!r} is not in the tree")

    if format_output == "table":
        console.print(proof_table(target, proof, tree.root))
        return

    response = ProofResponse(
        element=target,
        leaf=bytes_to_hex(hash_element(target)),
        root=bytes_to_hex(tree.root),
        proof=proof_to_models(proof),
    )
    click.echo(json.dumps(response.model_dump(mode="json"), indent=2))


@cli.command()
@click.argument("target")
@click.argument("elements", nargs=-1)
@element_file_option
@click.option("--proof", "proof_file", type=click.File("r"), required=True,
              help="Proof JSON file ('-' for stdin)")
@click.option("--root", "root_hex", help="Expected root (hex). Overrides the root in the proof file")
@click.pass_context
def verify(ctx, target: str, elements: Tuple[str, ...], element_file: Optional[IO[str]],
           proof_file: IO[str], root_hex: Optional[str]):
    """
    Verify an inclusion proof for TARGET.

    When ELEMENTS (or --file) are given, the proof is checked against the
    root of the tree they build. Otherwise it is checked against --root or
    the root recorded in the proof file.

    Exits with status 1 when the proof is invalid.
    """
    steps, file_root = load_proof(proof_file)
    proof = models_to_proof(steps)
    tree_elements = collect_elements(elements, element_file)

    if tree_elements:
        root = build_tree(tree_elements).root
    else:
        expected = root_hex or file_root
        if expected is None:
            raise click.ClickException("No root to verify against: give ELEMENTS, --root, or a proof file with a root")
        try:
            root = hex_to_bytes(expected)
        except ValueError as e:
            raise click.ClickException(str(e))

    valid = verify_proof(target, proof, root)
    logger.debug(f"Verified {target!r} against root {root.hex()}: {valid}")
    if valid:
        console.print(f"[green]✅ Valid proof for {target!r}[/green]")
    else:
        console.print(f"[red]❌ Invalid proof for {target!r}[/red]")
        ctx.exit(1)


@cli.command()
@click.argument("elements", nargs=-1)
@element_file_option
@click.option("--element", "-e", "target", help="Highlight the proof path of this element")
def visualize(elements: Tuple[str, ...], element_file: Optional[IO[str]], target: Optional[str]):
    """Visualize tree levels and, optionally, a proof path."""
    tree = build_tree(collect_elements(elements, element_file))
    console.print(render_tree(tree, target))
    console.print(level_table(tree))
    if target is not None:
        proof = tree.generate_proof(target)
        if proof is None:
            console.print(f"[yellow]Element {target!r} is not in the tree[/yellow]")
        else:
            console.print(proof_table(target, proof, tree.root))


@cli.command()
@click.option("--host", default=None, help="Host to bind to (default: MERKLE_TREE_HOST)")
@click.option("--port", default=None, type=int, help="Port to bind to (default: MERKLE_TREE_PORT)")
@click.option("--dev", is_flag=True, help="Enable development mode with auto-reload")
@click.pass_context
def serve(ctx, host: Optional[str], port: Optional[int], dev: bool):
    """Start the REST API server."""
    from .api.rest_api import run_server

    settings = load_settings()
    host = host or settings.host
    port = port or settings.port
    try:
        console.print(
            Panel(
                f"Starting Merkle Tree API Server\n\n"
                f"🚀 Server: http://{host}:{port}\n"
                f"📖 Docs: http://{host}:{port}/docs\n"
                f"❤️ Health: http://{host}:{port}/health\n\n"
                f"Press Ctrl+C to stop",
                title="API Server",
                border_style="green",
            )
        )

        run_server(host=host, port=port, dev=dev)

    except KeyboardInterrupt:
        console.print("\n[yellow]Server stopped by user[/yellow]")
    except Exception as e:
        console.print(f"[red]Server error: {e}[/red]", style="bold")
        if ctx.obj.get("verbose"):
            console.print_exception()
        sys.exit(1)


@cli.group()
@click.pass_context
def remote(ctx):
    """Operate on trees held by a running API server."""
    ctx.obj["client"] = TreeAPIClient(ctx.obj.get("api_url"))


def _client(ctx) -> TreeAPIClient:
    return ctx.obj["client"]


def _api_call(description: str, func, *args):
    try:
        return func(*args)
    except TreeAPIError as e:
        logger.error(f"Error during {description}: {e}")
        raise click.ClickException(str(e))


@remote.command("create")
@click.argument("name")
@click.argument("elements", nargs=-1)
@element_file_option
@click.pass_context
def remote_create(ctx, name: str, elements: Tuple[str, ...], element_file: Optional[IO[str]]):
    """Create tree NAME on the server."""
    summary = _api_call("create", _client(ctx).create_tree, name, collect_elements(elements, element_file))
    click.echo(json.dumps(summary.model_dump(), indent=2))


@remote.command("add")
@click.argument("name")
@click.argument("elements", nargs=-1, required=True)
@click.pass_context
def remote_add(ctx, name: str, elements: Tuple[str, ...]):
    """Append ELEMENTS to tree NAME on the server."""
    summary = _api_call("add", _client(ctx).add_elements, name, list(elements))
    click.echo(json.dumps(summary.model_dump(), indent=2))


@remote.command("prove")
@click.argument("name")
@click.argument("target")
@click.pass_context
def remote_prove(ctx, name: str, target: str):
    """Fetch a proof for TARGET from tree NAME."""
    response = _api_call("prove", _client(ctx).get_proof, name, target)
    click.echo(json.dumps(response.model_dump(mode="json"), indent=2))


@remote.command("verify")
@click.argument("name")
@click.argument("target")
@click.option("--proof", "proof_file", type=click.File("r"), required=True,
              help="Proof JSON file ('-' for stdin)")
@click.pass_context
def remote_verify(ctx, name: str, target: str, proof_file: IO[str]):
    """Verify a proof for TARGET against tree NAME's current root."""
    steps, _ = load_proof(proof_file)
    result = _api_call("verify", _client(ctx).verify, name, target, steps)
    if result.valid:
        console.print(f"[green]✅ Valid proof for {target!r}[/green]")
    else:
        console.print(f"[red]❌ Invalid proof for {target!r}[/red]")
        ctx.exit(1)


@remote.command("list")
@click.pass_context
def remote_list(ctx):
    """List trees on the server."""
    trees = _api_call("list", _client(ctx).list_trees)

    table = Table(title="Trees")
    table.add_column("Name", style="cyan")
    table.add_column("Leaves", style="green", justify="right")
    table.add_column("Depth", justify="right")
    table.add_column("Root")
    for tree in trees:
        table.add_row(tree.name, str(tree.leaf_count), str(tree.depth), tree.root or "-")
    console.print(table)


@remote.command("health")
@click.pass_context
def remote_health(ctx):
    """Check the health of the API server."""
    client = _client(ctx)
    healthy = client.health_check()

    table = Table(title="System Health Check")
    table.add_column("Component", style="cyan")
    table.add_column("Status", style="green")
    table.add_column("Details")
    table.add_row("Merkle Tree API", "✅ Healthy" if healthy else "❌ Unhealthy", client.base_url)
    console.print(table)

    if not healthy:
        ctx.exit(1)


if __name__ == "__main__":
    cli()
