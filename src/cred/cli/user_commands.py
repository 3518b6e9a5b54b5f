"""Firebase user management CLI commands."""

import asyncio
import json

import typer
from rich.panel import Panel
from rich.table import Table

from src.cred.cli.utils import console
from src.cred.core.firebase import initialize_firebase
from src.cred.core.services import AuthService
from src.cred.runtime.context import get_config

users_app = typer.Typer(help="👥 Firebase user management commands")


def get_auth_service() -> AuthService:
    """Get an AuthService bound to the configured Firebase app."""
    try:
        return AuthService(initialize_firebase(get_config().firebase))
    except Exception as e:
        console.print(f"[red]❌ Failed to initialize Firebase: {e}[/red]")
        console.print(
            "[yellow]Set GOOGLE_APPLICATION_CREDENTIALS to a service account file[/yellow]"
        )
        raise typer.Exit(1) from None


@users_app.command("list")
def list_users(
    limit: int = typer.Option(100, help="Maximum number of users to show"),
    page_token: str | None = typer.Option(None, help="Page token from a previous call"),
) -> None:
    """
    📋 List users.

    Shows a table of users with their email, display name, claims and status.
    """
    service = get_auth_service()

    try:
        result = asyncio.run(service.list_users(max_results=limit, page_token=page_token))
    except Exception as e:
        console.print(f"[red]❌ Failed to list users: {e}[/red]")
        raise typer.Exit(1) from None

    if not result.users:
        console.print("[yellow]No users found[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("UID", style="cyan")
    table.add_column("Email", style="green")
    table.add_column("Display Name", style="blue")
    table.add_column("Claims", style="yellow")
    table.add_column("Disabled", style="yellow")

    for user in result.users:
        table.add_row(
            user.uid,
            user.email or "",
            user.display_name or "",
            json.dumps(user.custom_claims or {}),
            "✅" if user.disabled else "❌",
        )

    console.print(table)
    console.print(f"\n[dim]Showing {len(result.users)} users[/dim]")
    if result.page_token:
        console.print(f"[dim]Next page token: {result.page_token}[/dim]")


@users_app.command("create")
def create_user(
    email: str = typer.Argument(..., help="Email address for the new user"),
    password: str = typer.Option(..., "--password", "-p", help="Password for the new user"),
    display_name: str | None = typer.Option(None, "--display-name", help="Display name"),
    admin: bool = typer.Option(False, "--admin", help="Grant the admin claim"),
) -> None:
    """➕ Create a new user."""
    console.print(Panel.fit(f"[bold green]Adding User: {email}[/bold green]", border_style="green"))
    service = get_auth_service()

    try:
        user = asyncio.run(
            service.create_user(email=email, password=password, display_name=display_name)
        )
        if admin:
            admin_claims = {get_config().auth.admin_claim: True}
            asyncio.run(service.set_custom_claims(user.uid, admin_claims))
    except Exception as e:
        console.print(f"[red]❌ Failed to create user: {e}[/red]")
        raise typer.Exit(1) from None

    console.print(f"[green]✅ User '{email}' created successfully![/green]")
    console.print(f"[blue]UID:[/blue] {user.uid}")
    if admin:
        console.print("[blue]Claims:[/blue] admin")


@users_app.command("delete")
def delete_user(
    uid: str = typer.Argument(..., help="UID of the user to delete"),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation"),
) -> None:
    """🗑️ Delete a user."""
    if not force and not typer.confirm(f"Delete user '{uid}'?"):
        console.print("[yellow]Aborted[/yellow]")
        raise typer.Exit(0)

    service = get_auth_service()
    try:
        asyncio.run(service.delete_user(uid))
    except Exception as e:
        console.print(f"[red]❌ Failed to delete user: {e}[/red]")
        raise typer.Exit(1) from None
    console.print(f"[green]✅ User '{uid}' deleted[/green]")


@users_app.command("set-claims")
def set_claims(
    uid: str = typer.Argument(..., help="UID of the user"),
    claims: str = typer.Argument(..., help='Claims as a JSON object, e.g. \'{"admin": true}\''),
    merge: bool = typer.Option(False, "--merge", help="Merge into existing claims"),
) -> None:
    """🏷️ Set custom claims on a user (overwrites unless --merge)."""
    try:
        parsed = json.loads(claims)
    except json.JSONDecodeError as e:
        console.print(f"[red]❌ Claims are not valid JSON: {e}[/red]")
        raise typer.Exit(1) from None
    if not isinstance(parsed, dict):
        console.print("[red]❌ Claims must be a JSON object[/red]")
        raise typer.Exit(1)

    service = get_auth_service()
    try:
        if merge:
            asyncio.run(service.merge_custom_claims(uid, parsed))
        else:
            asyncio.run(service.set_custom_claims(uid, parsed))
    except Exception as e:
        console.print(f"[red]❌ Failed to set claims: {e}[/red]")
        raise typer.Exit(1) from None
    console.print(f"[green]✅ Claims updated for '{uid}'[/green]")


@users_app.command("grant-admin")
def grant_admin(uid: str = typer.Argument(..., help="UID of the user")) -> None:
    """🛡️ Add the admin claim to a user, keeping existing claims."""
    service = get_auth_service()
    try:
        admin_claims = {get_config().auth.admin_claim: True}
        asyncio.run(service.merge_custom_claims(uid, admin_claims))
    except Exception as e:
        console.print(f"[red]❌ Failed to grant admin: {e}[/red]")
        raise typer.Exit(1) from None
    console.print(f"[green]✅ '{uid}' is now an admin[/green]")


@users_app.command("revoke")
def revoke_tokens(uid: str = typer.Argument(..., help="UID of the user")) -> None:
    """🔒 Revoke all refresh tokens for a user."""
    service = get_auth_service()
    try:
        asyncio.run(service.revoke_refresh_tokens(uid))
    except Exception as e:
        console.print(f"[red]❌ Failed to revoke tokens: {e}[/red]")
        raise typer.Exit(1) from None
    console.print(f"[green]✅ Refresh tokens revoked for '{uid}'[/green]")


@users_app.command("reset-link")
def reset_link(
    email: str = typer.Argument(..., help="Email of the user"),
    verify: bool = typer.Option(
        False, "--verify", help="Generate an email verification link instead"
    ),
) -> None:
    """✉️ Generate a password reset (or email verification) link."""
    service = get_auth_service()
    try:
        if verify:
            link = asyncio.run(service.generate_email_verification_link(email))
        else:
            link = asyncio.run(service.generate_password_reset_link(email))
    except Exception as e:
        console.print(f"[red]❌ Failed to generate link: {e}[/red]")
        raise typer.Exit(1) from None
    console.print(link)
