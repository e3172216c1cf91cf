"""CLI commands for wedding RSVP management."""

import asyncio
import json
from collections import Counter
from dataclasses import asdict

import typer
import uvicorn
from alembic import command
from alembic.config import Config

from src.config.logging import setup_logging
from src.config.settings import settings
from src.rsvps.dtos import RsvpRecord, StorageReadFailed, StorageUnavailable
from src.rsvps.repository.store import SqlRsvpStore

app = typer.Typer(help="CLI commands for wedding RSVP management")


async def _init_db(dsn: str) -> None:
    store = SqlRsvpStore.from_dsn(dsn)
    try:
        await store.initialize()
    finally:
        await store.dispose()


@app.command()
def init_db(
    dsn: str = typer.Option(
        None,
        "--dsn",
        "-d",
        help="Database URL (defaults to DB_DSN)",
    ),
):
    """Create the rsvps table if it does not exist yet."""
    dsn = dsn or settings.DB_DSN
    try:
        asyncio.run(_init_db(dsn))
    except StorageUnavailable as e:
        typer.secho(f"{e}: {e.__cause__}", fg=typer.colors.RED)
        raise typer.Exit(1)

    typer.secho("Database ready!", fg=typer.colors.GREEN)
    typer.secho(f"  DSN: {dsn}", fg=typer.colors.BLUE)


@app.command()
def migrate(
    revision: str = typer.Argument(
        "head",
        help="Alembic revision to upgrade to",
    ),
):
    """Run alembic migrations against DB_DSN."""
    command.upgrade(Config("alembic.ini"), revision)
    typer.secho(f"Upgraded to {revision}", fg=typer.colors.GREEN)


async def _list_rsvps(dsn: str) -> list[RsvpRecord]:
    store = SqlRsvpStore.from_dsn(dsn)
    try:
        return await store.list_all()
    finally:
        await store.dispose()


def _print_rsvp(record: RsvpRecord) -> None:
    color = typer.colors.GREEN if record.attending == "yes" else typer.colors.YELLOW
    party = f" x{record.guests}" if record.guests else ""
    typer.secho(f"#{record.id} {record.name}{party} ({record.attending})", fg=color)
    typer.secho(f"  Received: {record.created_at}", fg=typer.colors.CYAN)
    typer.secho(f"  Transport: {record.transport or 'N/A'}", fg=typer.colors.BLUE)
    if record.email:
        typer.secho(f"  Email: {record.email}", fg=typer.colors.BLUE)
    if record.allergies or record.other_allergies:
        notes = ", ".join(record.allergies + ([record.other_allergies] if record.other_allergies else []))
        typer.secho(f"  Dietary: {notes}", fg=typer.colors.MAGENTA)
    if record.song:
        typer.secho(f"  Song: {record.song}", fg=typer.colors.BLUE)
    if record.message:
        typer.secho(f"  Message: {record.message}", fg=typer.colors.BLUE)


@app.command()
def list_rsvps(
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the raw records as JSON",
    ),
    dsn: str = typer.Option(
        None,
        "--dsn",
        "-d",
        help="Database URL (defaults to DB_DSN)",
    ),
):
    """Show every RSVP received, newest first."""
    try:
        records = asyncio.run(_list_rsvps(dsn or settings.DB_DSN))
    except StorageReadFailed as e:
        typer.secho(f"{e}: {e.__cause__}", fg=typer.colors.RED)
        raise typer.Exit(1)

    if as_json:
        typer.echo(json.dumps([asdict(r) for r in records], default=str, ensure_ascii=False, indent=2))
        return

    if not records:
        typer.secho("No RSVPs yet.", fg=typer.colors.YELLOW)
        return

    for record in records:
        _print_rsvp(record)
        typer.echo()

    answers = Counter(record.attending for record in records)
    headcount = sum(record.guests or 0 for record in records if record.attending == "yes")
    typer.secho(
        f"{len(records)} responses: {answers['yes']} yes, {answers['no']} no, {headcount} guests",
        fg=typer.colors.GREEN,
    )


@app.command()
def serve(
    host: str = typer.Option(settings.app_host, "--host", help="Interface to bind"),
    port: int = typer.Option(settings.app_port, "--port", "-p", help="Port to listen on"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
):
    """Run the API server."""
    setup_logging()
    uvicorn.run("src.main:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    app()
