"""
errchain CLI

Inspect serialized error chains from the command line.

Usage::

    errchain show chain.bin              # Decode and print a chain
    errchain show -f json chain.bin      # ... as JSON
    cat chain.hex | errchain show --hex  # Hex input from stdin
    errchain has 7 chain.bin             # Exit 0 if kind 7 is in the chain
"""

import binascii
import logging

import click

from errchain.core.chain import ErrorNode, has
from errchain.core.codec import encode, to_json, unserialize
from errchain.core.config import ErrchainConfig
from errchain.exceptions import ConfigError


# ---------------------------------------------------------------------------
# Logging helpers
# ---------------------------------------------------------------------------

def _configure_logging(verbose: bool) -> None:
    """Set up logging for the CLI session."""
    config = ErrchainConfig.from_env()
    try:
        config.validate()
    except ConfigError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(2)
    level = logging.DEBUG if verbose else config.level
    logging.basicConfig(level=level, format=config.log_format)


# ---------------------------------------------------------------------------
# Top-level group
# ---------------------------------------------------------------------------

@click.group()
@click.version_option(package_name="errchain")
def cli():
    """errchain — inspect serialized error chains."""


# ---------------------------------------------------------------------------
# errchain show
# ---------------------------------------------------------------------------

@cli.command()
@click.argument("source", default="-", type=click.File("rb"))
@click.option("--hex", "is_hex", is_flag=True, help="Input is hex-encoded rather than raw bytes.")
@click.option("-f", "--format", "fmt",
              type=click.Choice(["display", "log", "dsv", "json"]),
              default="display", help="Output format.")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def show(source, is_hex: bool, fmt: str, verbose: bool):
    """Decode the binary error chain in SOURCE (default: stdin) and print it."""
    _configure_logging(verbose)
    chain = _load_chain(source, is_hex)
    click.echo(_render(chain, fmt))


# ---------------------------------------------------------------------------
# errchain has
# ---------------------------------------------------------------------------

@cli.command(name="has")
@click.argument("kind", type=int)
@click.argument("source", default="-", type=click.File("rb"))
@click.option("--hex", "is_hex", is_flag=True, help="Input is hex-encoded rather than raw bytes.")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def has_kind(kind: int, source, is_hex: bool, verbose: bool):
    """Print the outermost node of kind KIND; exit 1 when there is none."""
    _configure_logging(verbose)
    chain = _load_chain(source, is_hex)
    node, found = has(chain, kind)
    if not found:
        click.echo(f"kind {kind} not found", err=True)
        raise SystemExit(1)
    click.echo(node.as_log_line())


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _load_chain(source, is_hex: bool) -> ErrorNode:
    """Read SOURCE fully and decode it; bad hex exits with status 2."""
    data = source.read()
    if is_hex:
        try:
            data = binascii.unhexlify(b"".join(data.split()))
        except (binascii.Error, ValueError) as exc:
            click.echo(f"Error: invalid hex input: {exc}", err=True)
            raise SystemExit(2)
    return unserialize(data)


def _render(chain: ErrorNode, fmt: str) -> str:
    if fmt == "log":
        return chain.as_log_line()
    if fmt == "dsv":
        return encode(chain)
    if fmt == "json":
        return to_json(chain)
    return str(chain)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def main() -> None:
    cli(prog_name="errchain")


if __name__ == "__main__":
    main()
