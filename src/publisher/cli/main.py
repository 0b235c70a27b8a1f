"""Publisher CLI — run the server, manage the database, talk to the API.

Usage:
    publisher serve                          # Run the API with uvicorn
    publisher init-db                        # Apply alembic migrations
    publisher seed                           # Sample author/translator/editor accounts
    publisher login author@publisher.com     # Get a session token from a running server
    publisher whoami --token <token>         # Show the account behind a token
"""

from __future__ import annotations

import asyncio
import json
import os
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Optional

import click
import httpx

from publisher import __version__

if TYPE_CHECKING:
    from publisher.config import Settings

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

DEFAULT_API_URL = "http://localhost:3000"

SEED_PASSWORD = "password123"

SEED_USERS = [
    {
        "email": "author@publisher.com",
        "first_name": "John",
        "last_name": "Author",
        "pen_name": "J.A. Writer",
        "country_code": "US",
        "bio": "Award-winning author of 10+ bestselling novels",
        "role": "author",
    },
    {
        "email": "translator@publisher.com",
        "first_name": "Maria",
        "last_name": "Translator",
        "pen_name": None,
        "country_code": "ES",
        "bio": "Professional translator with 15 years experience",
        "role": "translator",
    },
    {
        "email": "editor@publisher.com",
        "first_name": "Emma",
        "last_name": "Editor",
        "pen_name": None,
        "country_code": "GB",
        "bio": "Experienced editor specializing in fiction and non-fiction",
        "role": "editor",
    },
]


def _api_url() -> str:
    return os.environ.get("PUBLISHER_API_URL", DEFAULT_API_URL).rstrip("/")


def _client() -> httpx.AsyncClient:
    """Build an async HTTP client pointed at the Publisher backend."""
    return httpx.AsyncClient(base_url=_api_url(), timeout=30.0)


def _pretty_json(data: dict | list) -> str:
    return json.dumps(data, indent=2, default=str)


def _fail(response: httpx.Response) -> None:
    try:
        body = response.json()
        message = body.get("message") or body.get("error") or response.text
    except ValueError:
        message = response.text
    click.secho(f"Error {response.status_code}: {message}", fg="red", err=True)
    sys.exit(1)


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version=__version__, prog_name="publisher")
def main():
    """Publisher — multi-role publishing platform backend."""


# ---------------------------------------------------------------------------
# publisher serve
# ---------------------------------------------------------------------------


@main.command()
@click.option("--host", help="Bind address (default: PUBLISHER_HOST)")
@click.option("--port", type=int, help="Port (default: PUBLISHER_PORT)")
@click.option("--reload", is_flag=True, help="Reload on code changes")
def serve(host: Optional[str], port: Optional[int], reload: bool):
    """Run the API server."""
    import uvicorn

    from publisher.config import settings

    uvicorn.run(
        "publisher.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )


# ---------------------------------------------------------------------------
# publisher init-db
# ---------------------------------------------------------------------------


@main.command("init-db")
@click.option("--revision", default="head", show_default=True)
def init_db(revision: str):
    """Create or upgrade the database schema."""
    from alembic import command
    from alembic.config import Config

    from publisher.config import settings

    cfg = Config()
    cfg.set_main_option(
        "script_location", str(Path(__file__).resolve().parent.parent / "db" / "migrations")
    )
    cfg.set_main_option("sqlalchemy.url", settings.database_url)
    command.upgrade(cfg, revision)
    click.secho(f"Database upgraded to {revision}", fg="green")


# ---------------------------------------------------------------------------
# publisher seed
# ---------------------------------------------------------------------------


@main.command()
def seed():
    """Insert sample accounts (password: password123) if they don't exist."""
    from publisher.config import settings

    created = asyncio.run(_seed_impl(settings))
    for email, role in created:
        click.secho(f"Created {role}: {email} / {SEED_PASSWORD}", fg="green")
    if not created:
        click.echo("Sample accounts already exist.")


async def _seed_impl(config: Settings) -> list[tuple[str, str]]:
    from sqlalchemy import select

    from publisher.auth.password import PasswordHasher
    from publisher.db.engine import build_engine, build_session_factory
    from publisher.db.models import User, UserRole

    engine = build_engine(config)
    hasher = PasswordHasher(rounds=config.bcrypt_rounds)
    password_hash = hasher.hash(SEED_PASSWORD)
    created = []

    try:
        async with build_session_factory(engine)() as db:
            for spec in SEED_USERS:
                exists = await db.execute(select(User.id).where(User.email == spec["email"]))
                if exists.first() is not None:
                    continue
                fields = {k: v for k, v in spec.items() if k != "role"}
                user = User(password_hash=password_hash, **fields)
                db.add(user)
                await db.flush()
                db.add(UserRole(user_id=user.id, role_type=spec["role"]))
                created.append((spec["email"], spec["role"]))
            await db.commit()
    finally:
        await engine.dispose()
    return created


# ---------------------------------------------------------------------------
# publisher login / whoami
# ---------------------------------------------------------------------------


@main.command()
@click.argument("email")
@click.option("--password", prompt=True, hide_input=True)
@click.option("--role", help="Which of your active roles to sign in as")
def login(email: str, password: str, role: Optional[str]):
    """Sign in against a running server and print the session token."""
    asyncio.run(_login_impl(email, password, role))


async def _login_impl(email: str, password: str, role: Optional[str]):
    body = {"email": email, "password": password}
    if role:
        body["role"] = role
    async with _client() as c:
        r = await c.post("/api/auth/login", json=body)
    if r.status_code != 200:
        _fail(r)
    data = r.json()
    click.secho(f"Signed in as {data['user']['email']} ({data['user']['role']})", fg="green")
    click.echo(data["token"])


@main.command()
@click.option("--token", envvar="PUBLISHER_TOKEN", required=True, help="Session token")
def whoami(token: str):
    """Show the profile behind a session token."""
    asyncio.run(_whoami_impl(token))


async def _whoami_impl(token: str):
    async with _client() as c:
        r = await c.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    if r.status_code != 200:
        _fail(r)
    click.echo(_pretty_json(r.json()["user"]))


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    main()
