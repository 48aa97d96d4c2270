"""
CRMLS proxy commands: connection test, token summary and listing search.
"""
import asyncio
import datetime as dt
from typing import Any, Dict, Optional

import typer
from rich.table import Table

from realtyapi.client import CRMLSService, CRMLSServiceError, SortOption, sort_properties
from realtyapi.crmls.upstream import token_preview

from ..utils import console, create_progress, format_price, print_error, print_info, print_success

app = typer.Typer(help="CRMLS proxy commands")

DEFAULT_BASE_URL = "http://127.0.0.1:8000"


def service_factory(base_url: str) -> CRMLSService:
    return CRMLSService(base_url=base_url)


@app.command("check")
def check_connection(
    base_url: str = typer.Option(DEFAULT_BASE_URL, "--base-url", help="Realty API base URL"),
) -> None:
    """Test that the proxy can obtain a CRMLS token."""
    async def _check() -> bool:
        async with service_factory(base_url) as service:
            return await service.test_connection()

    with create_progress() as progress:
        progress.add_task(description=f"Contacting {base_url}...", total=None)
        ok = asyncio.run(_check())

    if not ok:
        print_error("CRMLS proxy connection test failed")
        raise typer.Exit(code=1)
    print_success("CRMLS proxy connection test successful")


@app.command("token")
def show_token(
    base_url: str = typer.Option(DEFAULT_BASE_URL, "--base-url", help="Realty API base URL"),
) -> None:
    """Fetch a token through the proxy and show a summary."""
    async def _token():
        async with service_factory(base_url) as service:
            token = await service.authenticate()
            return token, service.token_expires_at

    try:
        token, expires_at = asyncio.run(_token())
    except CRMLSServiceError as e:
        print_error(f"Authentication failed: {e}")
        raise typer.Exit(code=1)

    print_success("Token received")
    print_info(f"  Token: {token_preview(token)}")
    if expires_at is not None:
        expiry = dt.datetime.fromtimestamp(expires_at, tz=dt.timezone.utc)
        print_info(f"  Expires: {expiry.isoformat(timespec='seconds')}")


@app.command("listings")
def search_listings(
    base_url: str = typer.Option(DEFAULT_BASE_URL, "--base-url", help="Realty API base URL"),
    city: Optional[str] = typer.Option(None, help="City filter"),
    min_price: Optional[int] = typer.Option(None, help="Minimum list price"),
    max_price: Optional[int] = typer.Option(None, help="Maximum list price"),
    page: int = typer.Option(1, min=1),
    per_page: int = typer.Option(12, min=1),
    sort: SortOption = typer.Option(SortOption.DEFAULT, help="Client-side ordering"),
) -> None:
    """Search listings through the proxy and print them as a table."""
    params: Dict[str, Any] = {"page": page, "per_page": per_page}
    if city:
        params["city"] = city
    if min_price:
        params["min_price"] = min_price
    if max_price:
        params["max_price"] = max_price

    async def _search():
        async with service_factory(base_url) as service:
            return await service.get_listings(params)

    try:
        response = asyncio.run(_search())
    except CRMLSServiceError as e:
        print_error(f"Listings fetch failed: {e}")
        raise typer.Exit(code=1)

    listings = sort_properties(response.data, sort)
    if not listings:
        print_info("No listings found")
        return

    table = Table(title=f"Listings (page {response.page or page}, {response.total or len(listings)} total)")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Address")
    table.add_column("Price", justify="right")
    table.add_column("Beds", justify="right")
    table.add_column("Baths", justify="right")
    table.add_column("Sq Ft", justify="right")
    table.add_column("Status")

    for listing in listings:
        table.add_row(
            listing.id or "-",
            listing.display_address or "-",
            format_price(listing.list_price),
            f"{listing.bedrooms:g}" if listing.bedrooms is not None else "-",
            f"{listing.bathrooms:g}" if listing.bathrooms is not None else "-",
            f"{listing.living_area:,.0f}" if listing.living_area else "-",
            listing.listing_status or "-",
        )
    console.print(table)
    if response.has_more:
        print_info(f"More results available: --page {(response.page or page) + 1}")
