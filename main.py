"""Main entry point for blockopt"""

import asyncio
import logging
from pathlib import Path
from typing import Optional, Tuple

import click

from auth.cli import auth_cli, get_session
from config import settings
from core.enums import BlockField
from core.exceptions import AuthError, BlockOptError
from core.models import IngestionResult
from ingestion import SpreadsheetIngestor
from optimization import OptimizerAPI, Workspace


@click.group()
@click.option('--verbose', '-v', is_flag=True, help='Log debug output')
def cli(verbose: bool):
    """blockopt - block optimization client"""
    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


cli.add_command(auth_cli, name="auth")


def _fail(message: str, error: Exception):
    click.echo(f"✗ {message}: {error}", err=True)
    if isinstance(error, AuthError):
        click.echo("  Please login again: blockopt auth login", err=True)
    raise click.Abort()


def _print_blocks(result: IngestionResult, keys: list[str]):
    columns = [BlockField.W1, BlockField.W2, BlockField.LENGTH, BlockField.THICKNESS, BlockField.ALPHA]
    click.echo(f"{len(result.blocks)} blocks")
    click.echo("  " + "  ".join(["ID".ljust(12)] + [c.value.ljust(10) for c in columns]))
    for key, block in zip(keys, result.blocks):
        cells = [str(block.display(c)).ljust(10) for c in columns]
        click.echo("  " + "  ".join([key.ljust(12)] + cells))


@cli.command()
@click.argument('file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--search', default=None, help='Only show blocks whose ID contains this text')
def blocks(file: Path, search: Optional[str]):
    """List the blocks in a requirements spreadsheet"""
    try:
        result = SpreadsheetIngestor().ingest_file(file)
    except BlockOptError as e:
        _fail("Import failed", e)

    workspace = Workspace()
    workspace.load(result)
    keys = workspace.identities()
    if search:
        shown = set(workspace.search(search))
        indices = [i for i, key in enumerate(keys) if key in shown]
        result = result.model_copy(update={"blocks": [result.blocks[i] for i in indices]})
        keys = [keys[i] for i in indices]
    _print_blocks(result, keys)


@cli.command()
@click.argument('file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--mark', 'marks', multiple=True, help='Block to include (repeatable)')
@click.option('--all', 'select_all', is_flag=True, help='Include every block')
@click.option(
    '--stock',
    default=lambda: settings.get_stock_presets()[0],
    show_default="first of STOCK_PRESETS",
    help='Stock block as W×H×L'
)
@click.option('--remote', is_flag=True, help='Parse the file on the server instead of locally')
def run(file: Path, marks: Tuple[str, ...], select_all: bool, stock: str, remote: bool):
    """Optimize cutting of the selected blocks"""
    async def _run():
        async with get_session() as session:
            if not session.store.is_authenticated:
                raise AuthError("Not logged in")
            api = OptimizerAPI(session.client)

            if remote:
                result = await api.upload(file.name, file.read_bytes())
            else:
                result = api.ingestor.ingest_file(file)

            workspace = Workspace()
            workspace.load(result)
            if select_all:
                workspace.select_all()
            for mark in marks:
                workspace.select(mark)

            click.echo(f"Running optimization for {len(workspace.selected)} blocks on {stock} stock...")
            return await workspace.run(api, stock)

    try:
        outcome = asyncio.run(_run())
    except BlockOptError as e:
        _fail("Optimization failed", e)

    if not outcome.configurations:
        click.echo("No configurations returned")
        return
    for config in sorted(outcome.configurations, key=lambda c: c.rank):
        click.echo(f"\n#{config.rank}  efficiency {config.efficiency}  waste {config.waste}")
        if config.description:
            click.echo(f"  {config.description}")
        if config.total_parts is not None:
            click.echo(f"  Parts: {config.total_parts}")
        if config.visualization_file:
            click.echo(f"  Visualization: {config.visualization_file}")


@cli.command()
@click.argument('name')
@click.option('--output', '-o', type=click.Path(dir_okay=False, path_type=Path), default=None,
              help='Where to write the HTML (default: <name>_visualization.html)')
def viz(name: str, output: Optional[Path]):
    """Download a configuration's visualization"""
    async def _fetch():
        async with get_session() as session:
            return await OptimizerAPI(session.client).fetch_visualization(name)

    try:
        html = asyncio.run(_fetch())
    except BlockOptError as e:
        _fail("Failed to load visualization", e)

    if output is None:
        stem = Path(name).name.replace(".html", "")
        output = Path(f"{stem}_visualization.html")
    output.write_text(html, encoding="utf-8")
    click.echo(f"✓ Visualization saved to {output}")


def main():
    cli()


if __name__ == "__main__":
    main()
