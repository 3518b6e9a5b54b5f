"""Admin CLI for the CRED backend."""

import typer

from .user_commands import users_app

app = typer.Typer(
    name="cred-admin",
    help="CRED admin CLI - Manage Firebase users and roles",
    rich_markup_mode="rich",
)

app.add_typer(users_app, name="users")

__all__ = ["app"]
