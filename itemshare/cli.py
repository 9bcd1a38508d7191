"""Command-line interface for itemshare."""

import json
import logging
import sys
from urllib.parse import parse_qs, urlparse

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from itemshare import __version__
from itemshare.config import DEFAULT_CONFIG_PATH, Config
from itemshare.errors import ShareError
from itemshare.models import IdentityToken, RetrievalOutcome, Success, outcome_to_dict
from itemshare.orchestrator import get_shared_item


console = Console()

EXIT_ERROR = 1
EXIT_NOT_RETRIEVED = 3

OUTCOME_MESSAGES = {
    "unauthorized": "You are not authorized to view this item.",
    "max_views": "This item has been viewed the maximum number of times.",
    "expired": "This item share has expired.",
    "not_found": "This item share could not be found.",
}

CONFIG_KEYS = ("base_url", "timeout", "user_agent")


def parse_share_link(value: str) -> str:
    """Extract the share secret from a share link, or return the value as-is.

    Accepts ``https://host/s#<secret>`` and ``https://host/s?s=<secret>``.
    """
    if "://" not in value:
        return value

    parsed = urlparse(value)
    if parsed.fragment:
        return parsed.fragment
    query_secret = parse_qs(parsed.query).get("s")
    if query_secret:
        return query_secret[0]
    return value


def format_expiry(outcome: Success) -> str:
    expires_at = outcome.metadata.expires_at
    return expires_at.strftime("%Y-%m-%d %H:%M %Z").strip() if expires_at else "never"


@click.group()
@click.version_option(__version__)
@click.option("--verbose", "-v", is_flag=True, help="Log each request attempt.")
def main(verbose: bool) -> None:
    """itemshare - Retrieve securely shared items."""
    if verbose:
        logging.basicConfig(
            level=logging.INFO,
            format="%(message)s",
            handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        )


@main.command("get")
@click.argument("share")
@click.option("--token", "-t", "tokens", multiple=True, help="Identity token; repeat in order of preference.")
@click.option("--base-url", default=None, help="Override the share service URL.")
@click.option("--json", "as_json", is_flag=True, help="Print the outcome as JSON.")
def get_command(share: str, tokens: tuple[str, ...], base_url: str | None, as_json: bool) -> None:
    """Retrieve the item behind a share link or secret."""
    config = Config.load()
    if base_url:
        config.base_url = base_url

    identity_tokens = [IdentityToken(token=t) for t in tokens]

    try:
        outcome = get_shared_item(parse_share_link(share), identity_tokens, config=config)
    except ShareError as e:
        console.print(f"[red]Failed to retrieve item: {e}[/red]")
        sys.exit(EXIT_ERROR)

    if as_json:
        click.echo(json.dumps(outcome_to_dict(outcome), indent=2))
    else:
        _print_outcome(outcome)

    if not isinstance(outcome, Success):
        sys.exit(EXIT_NOT_RETRIEVED)


def _print_outcome(outcome: RetrievalOutcome) -> None:
    if not isinstance(outcome, Success):
        message = OUTCOME_MESSAGES[outcome.outcome_type.value]
        console.print(f"[yellow]{message}[/yellow] [dim]({outcome.resource_id})[/dim]")
        return

    item = outcome.item
    metadata = outcome.metadata

    console.print()
    console.print(f"[bold]{item.title or item.uuid}[/bold]")
    if metadata.account_name:
        console.print(f"[dim]Shared from {metadata.account_name}[/dim]")
    console.print()

    table = Table(show_header=False)
    table.add_column("Field", style="dim")
    table.add_column("Value")
    table.add_row("UUID", outcome.resource_id)
    table.add_row("Expires", format_expiry(outcome))
    table.add_row("Max views", str(metadata.max_views) if metadata.max_views is not None else "unlimited")
    if metadata.account_type:
        table.add_row("Account type", metadata.account_type)
    table.add_row("Can join team", "yes" if metadata.can_join_team else "no")
    console.print(table)

    if item.details:
        console.print()
        console.print_json(data=item.details)


# =============================================================================
# Config commands
# =============================================================================


@main.group()
def config() -> None:
    """Show or change configuration."""
    pass


@config.command("show")
@click.option("--path", default=DEFAULT_CONFIG_PATH, show_default=True)
def config_show(path: str) -> None:
    """Show the current configuration."""
    cfg = Config.load(path)

    table = Table(show_header=True)
    table.add_column("Key")
    table.add_column("Value")
    for key, value in cfg.to_dict().items():
        if key == "extra":
            continue
        table.add_row(key, str(value))
    console.print(table)


@config.command("set")
@click.argument("key", type=click.Choice(CONFIG_KEYS))
@click.argument("value")
@click.option("--path", default=DEFAULT_CONFIG_PATH, show_default=True)
def config_set(key: str, value: str, path: str) -> None:
    """Set a configuration value."""
    cfg = Config.load(path)

    if key == "timeout":
        try:
            cfg.timeout = float(value)
        except ValueError:
            console.print(f"[red]Invalid timeout: {value}[/red]")
            sys.exit(EXIT_ERROR)
    else:
        setattr(cfg, key, value)

    cfg.save(path)
    console.print(f"[green]Set {key} = {value}[/green]")


if __name__ == "__main__":
    main()
