# manage.py

# Load .env before the settings object is built
from dotenv import load_dotenv
load_dotenv()

import asyncio
from typing import Optional

import typer
import uvicorn
from typing_extensions import Annotated

cli = typer.Typer(
    help="Management CLI for the ShipTrack API."
)


def _open_database():
    """Engine and session factory for the configured DATABASE_URL."""
    from shiptrack.config import get_settings
    from shiptrack.database import build_engine, build_session_factory

    settings = get_settings()
    engine = build_engine(settings.DATABASE_URL, echo=settings.SQL_ECHO)
    return settings, engine, build_session_factory(engine)


# --- Database Commands ---

@cli.command()
def init_db():
    """
    Create every table declared by the models.
    """
    from shiptrack.database import create_tables

    _, engine, _ = _open_database()

    async def run_create():
        typer.echo("Creating tables...")
        await create_tables(engine)
        await engine.dispose()
        typer.secho("Database initialized.", fg=typer.colors.GREEN)

    asyncio.run(run_create())


@cli.command()
def seed():
    """
    Insert the default shipping-service catalog (missing entries only).
    """
    from shiptrack.database import create_tables
    from shiptrack.services import CatalogService
    from shiptrack.storage import Storage

    settings, engine, session_factory = _open_database()

    async def run_seed():
        await create_tables(engine)
        async with session_factory() as session:
            added = await CatalogService(Storage(session), settings).seed_defaults()
        await engine.dispose()
        typer.secho(f"Added {added} shipping services.", fg=typer.colors.GREEN)

    asyncio.run(run_seed())


# --- User Management Commands ---

@cli.command()
def create_admin(
    name: Annotated[str, typer.Argument(help="Display name of the new admin.")],
    email: Annotated[str, typer.Argument(help="Email of the new admin (must be unique).")],
    password: Annotated[str, typer.Argument(help="Password of the new admin.")],
    phone: Annotated[Optional[str], typer.Option(help="Optional phone number.")] = None
):
    """
    Register a user and grant admin rights.
    """
    from shiptrack.database import create_tables
    from shiptrack.services import AuthService
    from shiptrack.services.exceptions import ShipTrackException
    from shiptrack.storage import Storage

    settings, engine, session_factory = _open_database()

    async def add_admin_user():
        typer.echo(f"Creating admin '{email}'...")
        await create_tables(engine)
        async with session_factory() as session:
            storage = Storage(session)
            try:
                _, user = await AuthService(storage, settings).register(
                    {'name': name, 'email': email, 'password': password, 'phone': phone}
                )
                async with storage.transaction():
                    await storage.set_user_admin(user.id, True)
                typer.secho(f"Admin '{user.email}' created with id {user.id}.", fg=typer.colors.GREEN)
            except ShipTrackException as e:
                typer.secho(f"Failed: {e.message}", fg=typer.colors.RED)
                raise typer.Exit(code=1)
            finally:
                await engine.dispose()

    asyncio.run(add_admin_user())


# --- Server Commands ---

@cli.command()
def run(
    host: str = "127.0.0.1",
    port: int = 8000,
    reload: bool = True
):
    """
    Start the Uvicorn development server.
    """
    typer.echo(f"Serving on http://{host}:{port}")
    uvicorn.run("main:app", host=host, port=port, reload=reload, factory=True)


if __name__ == "__main__":
    cli()
