"""
Main CLI command registration.

This module sets up the main CLI command group and registers all subcommands.
"""
import typer

# Create the main command group
app = typer.Typer(help="Realty API CLI")

@app.callback()
def main_callback():
    """Realty API command line interface."""
    pass

from . import server as server_module
app.add_typer(server_module.app, name="server", help="Server management commands")

from . import crmls as crmls_module
app.add_typer(crmls_module.app, name="crmls", help="CRMLS proxy commands")

from . import leads as leads_module
app.add_typer(leads_module.app, name="leads", help="Lead management commands")

__all__ = ['app']
