"""
Lead management commands.
"""
import asyncio

import typer
from rich.table import Table

from ..utils import console, print_info

app = typer.Typer(help="Lead management commands")


@app.command("list")
def list_leads(
    limit: int = typer.Option(20, min=1, help="Number of leads to show"),
) -> None:
    """Show the most recent seller leads."""
    from realtyapi.core.config import get_settings
    from realtyapi.db import Database
    from realtyapi.services import leads as leads_service

    settings = get_settings()

    async def _load():
        database = Database(settings.DATABASE_URL, echo_sql=settings.ECHO_SQL)
        try:
            await database.create_all()
            async with database.get_session() as session:
                return await leads_service.list_seller_leads(session, limit=limit)
        finally:
            await database.close()

    leads = asyncio.run(_load())
    if not leads:
        print_info("No seller leads yet")
        return

    table = Table(title=f"Seller leads ({len(leads)})")
    table.add_column("ID", style="cyan", justify="right")
    table.add_column("Received")
    table.add_column("Name")
    table.add_column("Contact")
    table.add_column("Property")

    for lead in leads:
        table.add_row(
            str(lead.id),
            lead.created_at.strftime("%Y-%m-%d %H:%M") if lead.created_at else "-",
            lead.name,
            f"{lead.email}\n{lead.phone}",
            f"{lead.street}, {lead.city}, {lead.state} {lead.zip}",
        )
    console.print(table)
