"""Typer CLI for Shopbridge."""

import asyncio

import typer
from rich.console import Console
from rich.table import Table

app = typer.Typer(name="shopbridge", help="Shopbridge: platform app install and webhook bridge")
console = Console()


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", help="Bind host"),
    port: int = typer.Option(8080, help="Bind port"),
):
    """Start the Shopbridge API server."""
    import uvicorn
    from shopbridge.app import create_app

    console.print(f"[bold green]Starting Shopbridge on {host}:{port}[/bold green]")
    uvicorn.run(create_app(), host=host, port=port)


@app.command()
def health(
    url: str = typer.Option("http://localhost:8080", help="Server URL"),
):
    """Check Shopbridge server health."""
    import httpx

    try:
        resp = httpx.get(f"{url}/health", timeout=5)
        data = resp.json()
        console.print(f"[bold green]{data['status']}[/bold green] v{data['version']}")
        for flag, value in data.get("env", {}).items():
            colour = "green" if value else "red"
            console.print(f"  {flag}: [{colour}]{value}[/{colour}]")
    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


async def _reprovision(shop: str):
    from shopbridge.deps import get_db, get_install_service, get_shopify_client

    db = get_db()
    await db.init()
    await db.create_all()
    try:
        return await get_install_service().reprovision(shop)
    finally:
        await get_shopify_client().close()
        await db.close()


@app.command()
def reprovision(
    shop: str = typer.Argument(..., help="Shop name or domain"),
):
    """Re-register webhook subscriptions for an installed shop."""
    from shopbridge.common.exceptions import BridgeError

    try:
        report = asyncio.run(_reprovision(shop))
    except BridgeError as e:
        console.print(f"[bold red]{e.code}[/bold red]: {e.message}")
        raise typer.Exit(1)

    table = Table(title=f"Webhooks for {report.tenant_id}")
    table.add_column("Topic")
    table.add_column("Status")
    table.add_column("Error")
    for outcome in report.outcomes:
        table.add_row(outcome.topic, outcome.status, outcome.error or "")
    console.print(table)
    if report.failed:
        raise typer.Exit(1)


async def _purge_states() -> int:
    from shopbridge.deps import get_db, get_state_store

    db = get_db()
    await db.init()
    await db.create_all()
    try:
        async with db.transaction() as session:
            return await get_state_store().purge_expired(session)
    finally:
        await db.close()


@app.command("purge-states")
def purge_states():
    """Delete expired OAuth state nonces."""
    removed = asyncio.run(_purge_states())
    console.print(f"Removed [bold]{removed}[/bold] expired state(s)")


if __name__ == "__main__":
    app()
