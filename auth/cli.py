"""CLI commands for authentication"""

import asyncio

import click

from core.exceptions import BlockOptError
from .session import Session


def get_session() -> Session:
    """Session bound to the persisted credential file, not yet restored"""
    return Session()


@click.group()
def auth_cli():
    """Authentication commands"""
    pass


@auth_cli.command()
@click.option('--username', prompt=True, help='Username')
@click.option('--password', prompt=True, hide_input=True, help='Password')
def login(username: str, password: str):
    """Login and store the session"""
    async def _login():
        async with get_session() as session:
            try:
                pair = await session.auth.login(username, password)
            except BlockOptError as e:
                click.echo(f"✗ Login failed: {e}", err=True)
                raise click.Abort()
        click.echo("✓ Login successful!")
        click.echo(f"  User: {pair.subject}")

    asyncio.run(_login())


@auth_cli.command()
def logout():
    """Logout and forget the stored session"""
    session = get_session().init()
    was_logged_in = session.store.is_authenticated
    session.teardown()
    asyncio.run(session.aclose())
    if was_logged_in:
        click.echo("✓ Logout successful")
    else:
        click.echo("Not logged in")


@auth_cli.command()
def whoami():
    """Show the logged-in user"""
    session = get_session().init()
    asyncio.run(session.aclose())
    if not session.store.is_authenticated:
        click.echo("✗ Not logged in", err=True)
        return
    click.echo(f"User: {session.store.subject}")
    click.echo(f"State: {session.state.value}")
