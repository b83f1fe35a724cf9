import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
import uvicorn

from ..common.formatting import format_money
from ..core.config import HOST, LOG_LEVEL, PORT, SALES_COLLECTION
from ..core.logging_config import configure_logging
from ..features.reports.service import ReportFailed, generate_sales_report
from ..features.sales.store import InMemorySalesStore, SalesStore, init_sales_store
from ..main import create_app
from .commands.sales_command import command_app as sales_app, read_sale_documents

logger = logging.getLogger(__name__)

app = typer.Typer(name="sales-reports", help="CLI for the TechNorth sales report service.")
app.add_typer(sales_app)


def _init_store_or_exit() -> SalesStore:
    """Initializes the configured store, exiting with code 1 if that is impossible."""
    result = init_sales_store()
    if not result.ok:
        typer.secho(f"Error: {result.error}", fg=typer.colors.RED)
        raise typer.Exit(code=1)
    return result.store


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level.")):
    configure_logging("DEBUG" if verbose else LOG_LEVEL)


@app.command("serve")
def serve_command(
    host: str = typer.Option(HOST, help="Interface to bind."),
    port: int = typer.Option(PORT, help="Port to listen on."),
):
    """Starts the HTTP service. Exits before listening if the sales store can't be initialized."""
    store = _init_store_or_exit()

    typer.echo(f"Sales report service running on port {port} ({store.name} store)")
    uvicorn.run(create_app(store=store), host=host, port=port)


@app.command("render")
def render_command(
    output: Path = typer.Argument(..., dir_okay=False, help="Where to write the PDF."),
    from_json: Optional[Path] = typer.Option(
        None, "--from-json", exists=True, dir_okay=False,
        help="Render these sales (JSON array) instead of reading the configured store.",
    ),
):
    """Writes the sales report PDF to a file."""
    if from_json is not None:
        store = InMemorySalesStore(read_sale_documents(from_json))
    else:
        store = _init_store_or_exit()
    asyncio.run(_render(store, output))


async def _render(store: SalesStore, output: Path):
    await store.open()
    try:
        outcome = await generate_sales_report(store)
    finally:
        await store.close()

    if isinstance(outcome, ReportFailed):
        typer.secho(f"Error ({outcome.stage}): {outcome.message}", fg=typer.colors.RED)
        raise typer.Exit(code=1)

    output.write_bytes(outcome.pdf)
    typer.secho(
        f"Wrote {output}: {outcome.row_count} sale(s) on {outcome.page_count} page(s), "
        f"total {format_money(outcome.grand_total)}",
        fg=typer.colors.GREEN,
    )


@app.command("check-store")
def check_store_command():
    """Connects to the configured sales store and counts its sales."""
    store = _init_store_or_exit()
    asyncio.run(_check_store(store))


async def _check_store(store: SalesStore):
    await store.open()
    try:
        documents = await store.fetch_sales(SALES_COLLECTION)
    except Exception as e:
        typer.secho(f"Error querying '{SALES_COLLECTION}': {e}", fg=typer.colors.RED)
        raise typer.Exit(code=1)
    finally:
        await store.close()
    typer.echo(f"Connected to the {store.name} store: {len(documents)} sale(s) in '{SALES_COLLECTION}'.")


if __name__ == "__main__":
    app()
