"""Command-line interface for CryptoEx."""

import asyncio
from datetime import datetime
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from cryptoex.auth.models import Result
from cryptoex.auth.service import AuthService
from cryptoex.logging_config import configure_logging, get_logger
from cryptoex.referral.ledger import now_ms
from cryptoex.settings import Settings
from cryptoex.storage.db import Database, SqlStorage

# Configure logging
configure_logging()
logger = get_logger(__name__)

# Create Typer app
app = typer.Typer(
    name="cryptoex",
    help="CryptoEx - demo exchange accounts and referral tracking",
    no_args_is_help=True,
)

# Rich console for pretty output
console = Console()


def _service() -> AuthService:
    settings = Settings()
    database = Database(settings.database_url, echo=settings.database_echo)
    database.create_tables()
    return AuthService(SqlStorage(database), settings=settings)


def _report(result: Result, success: str) -> None:
    if result.ok:
        console.print(f"[bold green]✓[/bold green] {success}")
        return
    console.print(f"[bold red]✗[/bold red] {result.message}")
    raise typer.Exit(1)


def _format_ts(timestamp: int) -> str:
    return datetime.fromtimestamp(timestamp / 1000).strftime("%Y-%m-%d %H:%M")


@app.command("init")
def init_storage() -> None:
    """Initialize the storage database."""
    console.print("[bold blue]Initializing storage...[/bold blue]")
    _service()
    console.print("[bold green]✓[/bold green] Storage initialized successfully")


@app.command("register")
def register(
    email: Annotated[str, typer.Argument(help="Account email")],
    password: Annotated[str, typer.Option("--password", "-p", prompt=True, hide_input=True, confirmation_prompt=True)],
) -> None:
    """Create an account and sign in."""
    result = asyncio.run(_service().register(email, password))
    _report(result, f"Registered and signed in as [bold]{email.strip()}[/bold]")


@app.command("login")
def login(
    email: Annotated[str, typer.Argument(help="Account email")],
    password: Annotated[str, typer.Option("--password", "-p", prompt=True, hide_input=True)],
) -> None:
    """Sign in."""
    result = asyncio.run(_service().login(email, password))
    _report(result, f"Signed in as [bold]{email.strip()}[/bold]")


@app.command("logout")
def logout() -> None:
    """Sign out."""
    _report(_service().logout(), "Signed out")


@app.command("whoami")
def whoami() -> None:
    """Show the signed-in user."""
    user = _service().get_current_user()
    if user is None:
        console.print("[yellow]Not signed in[/yellow]")
        raise typer.Exit(1)

    console.print(f"[bold]Email:[/bold] {user.email}")
    console.print(f"[bold]Referral code:[/bold] {user.ref_code}")


@app.command("passwd")
def change_password(
    old_password: Annotated[str, typer.Option("--old", prompt="Current password", hide_input=True)],
    new_password: Annotated[str, typer.Option("--new", prompt="New password", hide_input=True, confirmation_prompt=True)],
) -> None:
    """Change the password of the signed-in user."""
    result = asyncio.run(_service().change_password(old_password, new_password))
    _report(result, "Password changed")


@app.command("profile")
def show_profile() -> None:
    """Show the signed-in user's profile."""
    profile = _service().get_my_profile()
    if profile is None:
        console.print("[yellow]Not signed in[/yellow]")
        raise typer.Exit(1)

    table = Table(title=profile.email)
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Last name", profile.last_name)
    table.add_row("First name", profile.first_name)
    table.add_row("Middle name", profile.middle_name)
    table.add_row("Telegram", profile.telegram)
    table.add_row("Phone", profile.phone)
    console.print(table)


@app.command("profile-update")
def update_profile(
    last_name: Annotated[str | None, typer.Option("--last-name")] = None,
    first_name: Annotated[str | None, typer.Option("--first-name")] = None,
    middle_name: Annotated[str | None, typer.Option("--middle-name")] = None,
    telegram: Annotated[str | None, typer.Option("--telegram")] = None,
    phone: Annotated[str | None, typer.Option("--phone")] = None,
) -> None:
    """Update profile fields; omitted fields keep their value."""
    fields = {
        "last_name": last_name,
        "first_name": first_name,
        "middle_name": middle_name,
        "telegram": telegram,
        "phone": phone,
    }
    _report(_service().update_profile(fields), "Profile updated")


@app.command("exchange-add")
def add_exchange(
    give: Annotated[str, typer.Option("--give", help="Currency given, e.g. BTC")],
    get: Annotated[str, typer.Option("--get", help="Currency received, e.g. USDT")],
    amount: Annotated[float, typer.Option("--amount", "-a", help="Amount given")],
    received: Annotated[float | None, typer.Option("--received", help="Amount received")] = None,
) -> None:
    """Record an exchange for the signed-in user."""
    record = {
        "give": give.upper(),
        "get": get.upper(),
        "amount": amount,
        "received": received,
        "createdAt": now_ms(),
    }
    _report(_service().add_exchange(record), "Exchange recorded")


@app.command("history")
def show_history() -> None:
    """List the signed-in user's exchanges, newest first."""
    service = _service()
    if not service.require_auth():
        console.print("[yellow]Not signed in[/yellow]")
        raise typer.Exit(1)

    history = service.get_my_history()
    if not history:
        console.print("[yellow]No exchanges yet[/yellow]")
        return

    table = Table(title="Exchanges")
    table.add_column("When")
    table.add_column("Give", style="cyan")
    table.add_column("Get", style="green")
    table.add_column("Amount", justify="right")
    table.add_column("Received", justify="right")

    for record in history:
        created = record.get("createdAt")
        table.add_row(
            _format_ts(created) if isinstance(created, int) else "",
            str(record.get("give", "")),
            str(record.get("get", "")),
            str(record.get("amount", "")),
            "" if record.get("received") is None else str(record["received"]),
        )

    console.print(table)


@app.command("visit")
def visit(
    url: Annotated[str, typer.Argument(help="Visited page URL, e.g. https://site/index.html?ref=CODE")],
) -> None:
    """Process a page visit that may carry a referral code."""
    if _service().track_visit(url):
        console.print("[bold green]✓[/bold green] Referral click recorded")
    else:
        console.print("[yellow]No referral click recorded[/yellow]")


@app.command("ref")
def referral_summary(
    page_url: Annotated[str | None, typer.Option("--page-url", help="Page the link is built from")] = None,
) -> None:
    """Show the signed-in user's referral link and stats."""
    summary = _service().get_my_ref_summary(page_url)
    if summary is None:
        console.print("[yellow]Not signed in[/yellow]")
        raise typer.Exit(1)

    console.print(f"[bold]Code:[/bold] {summary.ref_code}")
    console.print(f"[bold]Link:[/bold] {summary.ref_link}")
    console.print(f"[bold]Clicks:[/bold] {summary.clicks_count}")
    console.print(f"[bold]Registrations:[/bold] {summary.regs_count}")

    if summary.regs_recent:
        table = Table(title="Recent registrations")
        table.add_column("When")
        table.add_column("Email", style="green")
        for reg in summary.regs_recent:
            table.add_row(_format_ts(reg.timestamp), reg.email)
        console.print(table)


if __name__ == "__main__":
    app()
