"""
Server management commands.
"""
import typer
from typing import Optional

from ..utils import print_info, print_success

# Create the command group
app = typer.Typer(help="Server management commands")

@app.command("run")
def run_server(
    host: Optional[str] = typer.Option(None, help="Bind address, defaults to HOST"),
    port: Optional[int] = typer.Option(None, help="Port, defaults to PORT"),
    reload: Optional[bool] = typer.Option(None, "--reload/--no-reload", help="Reload on code changes"),
) -> None:
    """Run the API server."""
    # Import uvicorn only when needed
    import uvicorn
    from realtyapi.core.config import get_settings

    settings = get_settings()
    host = host or settings.HOST
    port = port or settings.PORT
    reload = settings.RELOAD if reload is None else reload

    print_success(f"Starting Realty API at http://{host}:{port}")
    uvicorn.run("realtyapi.main:app", host=host, port=port, reload=reload)

@app.command("status")
def server_status() -> None:
    """Show the effective configuration."""
    from realtyapi.core.config import get_settings
    from realtyapi.db import Database

    settings = get_settings()
    print_info("Server status:")
    print_info(f"  Environment: {settings.ENV}")
    print_info(f"  Debug mode: {settings.DEBUG}")
    print_info(f"  Database: {Database._obfuscate_url(settings.DATABASE_URL)}")
    print_info(f"  CRMLS credentials: {'configured' if settings.has_crmls_credentials else 'missing'}")
