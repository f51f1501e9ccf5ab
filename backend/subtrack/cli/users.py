"""Flask CLI commands for account administration."""

from __future__ import annotations

import logging

import click
from flask import current_app
from flask.cli import with_appcontext

from subtrack.services._shared.errors import ConflictError
from subtrack.services.auth.dto import SignUpIn
from subtrack.services.auth.service import AuthService

LOGGER = logging.getLogger(__name__)


@click.group("users")
def users_cli() -> None:
    """Account administration commands."""


@users_cli.command("create-admin")
@click.option("--name", default="Admin", show_default=True, help="Display name.")
@click.option(
    "--password",
    prompt=True,
    hide_input=True,
    confirmation_prompt=True,
    help="Password for the admin account.",
)
@with_appcontext
def create_admin_command(name: str, password: str) -> None:
    """Create the account whose email matches ``ADMIN_EMAIL``."""
    email = current_app.config.get("ADMIN_EMAIL")
    if not email:
        raise click.UsageError("ADMIN_EMAIL is not configured.")

    service = AuthService(
        token_issuer=current_app.extensions["token_issuer"],
        revocations=current_app.extensions["revocation_registry"],
    )
    try:
        out = service.sign_up(SignUpIn(name=name, email=email, password=password))
    except ConflictError:
        click.echo(f"Admin account {email} already exists.")
        return
    LOGGER.info("cli.admin_created", extra={"user_id": out.user.id})
    click.echo(f"Created admin account {out.user.email} (id={out.user.id}).")
