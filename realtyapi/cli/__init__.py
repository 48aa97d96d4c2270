"""
Command Line Interface for the Realty API.

This module provides the main entry point for the ``realtyapi`` CLI.
It imports and registers all command groups from the commands package.
"""
from .commands import app

__all__ = ['app']

# This allows the module to be run directly with `python -m realtyapi.cli`
if __name__ == "__main__":
    app()
