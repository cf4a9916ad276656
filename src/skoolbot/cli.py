"""Skoolbot generator CLI."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from skoolbot import __version__
from skoolbot.blocks import Block, Workspace
from skoolbot.config import config_for
from skoolbot.errors import DiagnosticRenderer, SkoolbotError
from skoolbot.generator import Generator
from skoolbot.loader import load_workspace


def _report(error: SkoolbotError) -> None:
    renderer = DiagnosticRenderer(color=True)
    click.echo(renderer.render(error.diagnostic()), err=True)


def _generate(file: Path) -> tuple[Generator, str]:
    """Load *file* and run one pass. Exits with status 1 on error."""
    generator = Generator(config_for(file))
    try:
        workspace = load_workspace(file)
        code = generator.workspace_to_code(workspace)
    except SkoolbotError as e:
        _report(e)
        raise SystemExit(1)
    return generator, code


def _highlight(code: str) -> str:
    from pygments import highlight
    from pygments.formatters import TerminalFormatter

    from pygments_skoolbot import SkoolbotLexer

    return highlight(code, SkoolbotLexer(), TerminalFormatter())


@click.group()
@click.version_option(__version__, prog_name="skoolbot")
@click.option("-v", "--verbose", is_flag=True, help="Log each generation step.")
def main(verbose: bool) -> None:
    """Generate Skoolbot code from math blocks."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        force=True,
    )


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "-o", "--output", type=click.Path(dir_okay=False, path_type=Path),
    help="Write to a file instead of stdout.",
)
@click.option("--color/--no-color", default=False, help="Syntax-highlight the output.")
def generate(file: Path, output: Path | None, color: bool) -> None:
    """Generate Skoolbot source for a blocks JSON file."""
    _generator, code = _generate(file)
    if output is not None:
        output.write_text(code)
        click.echo(f"wrote {output}")
        return
    click.echo(_highlight(code) if color else code, nl=False, color=True if color else None)


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def check(file: Path) -> None:
    """Run a generation pass without writing any output."""
    generator, _code = _generate(file)
    click.echo(f"checked {file}: no errors, {len(generator.helpers)} helper(s)")


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def helpers(file: Path) -> None:
    """List the helper functions a blocks file needs."""
    generator, _code = _generate(file)
    for definition in generator.helpers.definitions():
        click.echo(definition.splitlines()[0])


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def view(file: Path) -> None:
    """Print the block tree of a blocks JSON file."""
    try:
        workspace = load_workspace(file)
    except SkoolbotError as e:
        _report(e)
        raise SystemExit(1)
    _dump_workspace(workspace)


def _dump_workspace(workspace: Workspace) -> None:
    if workspace.variables:
        click.echo(f"variables: {', '.join(workspace.variables)}")
    for block in workspace.blocks:
        _dump_block(block, 0)


def _dump_block(block: Block, depth: int) -> None:
    """Print a readable block tree dump."""
    indent = "  " * depth
    marker = "" if block.enabled else " (disabled)"
    click.echo(f"{indent}{block.type}{marker}")
    for name, value in block.fields.items():
        click.echo(f"{indent}  {name}: {value!r}")
    for slot, child in block.inputs.items():
        if child is None:
            click.echo(f"{indent}  {slot}: <empty>")
        else:
            click.echo(f"{indent}  {slot}:")
            _dump_block(child, depth + 2)
    if block.next is not None:
        _dump_block(block.next, depth)
