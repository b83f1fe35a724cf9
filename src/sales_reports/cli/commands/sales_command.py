"""`sales-reports sales ...`: manage the sales kept in the Tortoise database."""
import asyncio
import json
from pathlib import Path

import typer
from tortoise import Tortoise

from ...common.formatting import format_money
from ...core.config import TORTOISE_ORM_CONFIG
from ...features.sales.service import list_stored_sales, load_sales, parse_sale_documents

command_app = typer.Typer(name="sales", help="Manage the sales stored in the SQL database.")


class DBConnection:
    async def __aenter__(self):
        await Tortoise.init(config=TORTOISE_ORM_CONFIG)
        await Tortoise.generate_schemas(safe=True)  # Generate schema if it doesn't exist
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await Tortoise.close_connections()


def read_sale_documents(path: Path) -> list:
    """Reads a JSON array of sale documents."""
    try:
        documents = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        typer.secho(f"Error: could not read '{path}': {e}", fg=typer.colors.RED)
        raise typer.Exit(code=1)
    if not isinstance(documents, list):
        typer.secho(f"Error: '{path}' must contain a JSON array of sales.", fg=typer.colors.RED)
        raise typer.Exit(code=1)
    return documents


@command_app.command("load")
def load_sales_command(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON file with an array of sales."),
    replace: bool = typer.Option(False, "--replace", help="Delete the stored sales first."),
):
    """Loads sales from a JSON file into the database."""
    documents = read_sale_documents(path)
    try:
        sales = parse_sale_documents(documents)
    except ValueError as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED)
        raise typer.Exit(code=1)
    asyncio.run(_load_sales(sales, replace))


async def _load_sales(sales, replace: bool):
    async with DBConnection():
        count = await load_sales(sales, replace=replace)
        typer.secho(f"Loaded {count} sale(s).", fg=typer.colors.GREEN)


@command_app.command("list")
def list_sales_command(
    limit: int = typer.Option(20, min=1, help="How many of the newest sales to show."),
):
    """Lists stored sales, newest first."""
    asyncio.run(_list_sales(limit))


async def _list_sales(limit: int):
    async with DBConnection():
        sales = await list_stored_sales(limit)
        if not sales:
            typer.echo("No sales stored.")
            return
        for sale in sales:
            when = sale.timestamp.isoformat() if sale.timestamp else "N/A"
            typer.echo(f"{when}  {sale.employee_email or 'N/A':<30}  {format_money(sale.total)}")
