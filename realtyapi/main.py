"""
ASGI entry point: ``uvicorn realtyapi.main:app``.
"""
from . import create_app

app = create_app()
