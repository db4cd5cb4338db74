"""
LiqPass CLI

Run the verification gateway, check an order from the shell, inspect the
gateway configuration, and list insurance products.
"""
import asyncio
import json

import click
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from liqpass.config import get_config
from liqpass.utils import get_logger, setup_logging

console = Console()
logger = get_logger(__name__)


# ═══════════════════════════════════════════════════════════════════
# MAIN CLI GROUP
# ═══════════════════════════════════════════════════════════════════

@click.group()
@click.version_option(version='1.0.0')
def main():
    """
    LiqPass - exchange order verification and liquidation cover purchases
    """
    load_dotenv()
    config = get_config()
    setup_logging(config.log_level, config.log_file)


# ═══════════════════════════════════════════════════════════════════
# GATEWAY COMMANDS
# ═══════════════════════════════════════════════════════════════════

@main.command()
@click.option('--host', default=None, help='Bind address (defaults to config)')
@click.option('--port', type=int, default=None, help='Port (defaults to PORT / JP_PORT)')
def serve(host, port):
    """Run the verification gateway"""
    import uvicorn

    from liqpass.api.main import create_app

    config = get_config()
    host = host or config.host
    port = port or config.port
    console.print(f"[bold blue]LiqPass gateway[/bold blue] on http://{host}:{port} (mode={config.verify_mode})")
    uvicorn.run(create_app(config), host=host, port=port, log_level=config.log_level.lower())


@main.command()
@click.argument('exchange')
@click.argument('pair')
@click.argument('order_ref')
@click.argument('wallet')
@click.option('--json', 'as_json', is_flag=True, help='Print the raw response envelope')
def verify(exchange, pair, order_ref, wallet, as_json):
    """Verify one exchange order in-process"""
    from liqpass.verification.dispatcher import VerificationDispatcher
    from liqpass.verification.registry import build_default_registry

    config = get_config()
    dispatcher = VerificationDispatcher(config, build_default_registry(config))
    payload = {"exchange": exchange, "pair": pair, "orderRef": order_ref, "wallet": wallet}

    with console.status(f"[bold green]Verifying {exchange} order {order_ref}..."):
        result = asyncio.run(dispatcher.dispatch(payload))

    if as_json:
        console.print_json(json.dumps(result.body))
    else:
        table = Table(title=f"Verification ({config.verify_mode} mode)")
        table.add_column("Field", style="cyan")
        table.add_column("Value", style="magenta")
        table.add_row("HTTP status", str(result.status_code))
        for key, value in result.body.items():
            if key == "diagnostics":
                continue
            table.add_row(key, str(value))
        for key, value in (result.body.get("diagnostics") or {}).items():
            table.add_row(f"diagnostics.{key}", str(value))
        console.print(table)

    if result.status_code != 200:
        raise SystemExit(1)


@main.command()
def health():
    """Show the gateway health snapshot for the current configuration"""
    from liqpass.api.routes.health import health_snapshot

    snapshot = health_snapshot(get_config()).model_dump(by_alias=True)

    table = Table(title="Gateway Health")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="magenta")
    for key, value in snapshot.items():
        table.add_row(key, str(value))
    console.print(table)


# ═══════════════════════════════════════════════════════════════════
# CATALOG COMMANDS
# ═══════════════════════════════════════════════════════════════════

@main.command()
def skus():
    """List insurance products from the order backend"""
    from liqpass.client.base import ApiError
    from liqpass.client.catalog import CatalogClient

    try:
        options = asyncio.run(CatalogClient(get_config()).fetch_skus())
    except ApiError as e:
        console.print(f"\n[red]✗ Error: {e}[/red]")
        raise SystemExit(1)

    table = Table(title="Products")
    table.add_column("Code", style="cyan")
    table.add_column("Label")
    table.add_column("Premium", style="magenta")
    table.add_column("Payout", style="magenta")
    for option in options:
        table.add_row(
            option.code,
            option.label,
            "" if option.premium is None else f"{option.premium:g}",
            "" if option.payout is None else f"{option.payout:g}",
        )
    console.print(table)


if __name__ == '__main__':
    main()
