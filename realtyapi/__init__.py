#main __init__.py
"""
Realty API - backend for a real-estate listings site, built on FastAPI.

Proxies the CRMLS listings provider (token exchange and property search),
stores favorites and seller leads, and ships a client for the proxy.
"""

__version__ = "0.1.0"

from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import logging

from .api import api_router
from .core.config import Settings, get_settings
from .crmls import CRMLSError, UpstreamClient
from .db import Database
from .middleware import MiddlewareManager

# Initialize module-level logger; logging configuration is handled in `create_app`
logger = logging.getLogger(__name__)


@asynccontextmanager
async def _lifespan(app: "RealtyAPI"):
    await app.on_startup()
    try:
        yield
    finally:
        await app.on_shutdown()


class RealtyAPI(FastAPI):
    """Main application class for the Realty API."""
    
    def __init__(self, *args, **kwargs):
        kwargs.setdefault("lifespan", _lifespan)
        super().__init__(*args, **kwargs)
        self.logger = logging.getLogger(__name__)

    async def on_startup(self):
        """Create database tables."""
        self.logger.info("Starting up Realty API...")
        try:
            await self.state.db.create_all()
        except Exception as e:
            self.logger.error(f"Error during startup: {e}")
            raise

    async def on_shutdown(self):
        """Close the upstream HTTP client and the database engine."""
        self.logger.info("Shutting down Realty API...")
        try:
            await self.state.upstream.close()
            await self.state.db.close()
            self.logger.info("Realty API shutdown complete")
        except Exception as e:
            self.logger.error(f"Error during application shutdown: {e}", exc_info=True)
            raise


async def crmls_error_handler(request: Request, exc: CRMLSError) -> JSONResponse:
    """Render a CRMLS proxy error as its JSON body and status."""
    logger.warning(f"CRMLS proxy error on {request.url.path}: {exc.status_code} {exc.error}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def create_app(
    settings: Optional[Settings] = None,
    *,
    upstream_transport: Optional[httpx.AsyncBaseTransport] = None,
    title: Optional[str] = None,
    description: str = "CRMLS listings proxy, favorites and lead capture",
    version: str = __version__,
    docs_url: str = "/docs",
    redoc_url: str = "/redoc",
    openapi_url: str = "/openapi.json",
    debug: Optional[bool] = None,
    **kwargs
) -> RealtyAPI:
    """
    Create and configure the Realty application.
    
    Args:
        settings: Settings to use; read from the environment when omitted.
        upstream_transport: httpx transport for CRMLS calls, mainly for tests.
        title: The title of the API, defaults to ``settings.APP_NAME``.
        description: The description of the API.
        version: The version of the API.
        docs_url: The URL where the API documentation will be served.
        redoc_url: The URL where the ReDoc documentation will be served.
        openapi_url: The URL where the OpenAPI schema will be served.
        debug: Whether to run in debug mode, defaults to ``settings.DEBUG``.
        **kwargs: Additional keyword arguments to pass to the FastAPI constructor.
    Returns:
        RealtyAPI: The configured application instance.
    """
    settings = settings or get_settings()
    debug = settings.DEBUG if debug is None else debug

    # Configure logging
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    
    try:
        logger.info(f"Creating {settings.APP_NAME} application (version: {version}, env: {settings.ENV})")
        
        app = RealtyAPI(
            title=title or settings.APP_NAME,
            description=description,
            version=version,
            docs_url=docs_url,
            redoc_url=redoc_url,
            openapi_url=openapi_url,
            debug=debug,
            **kwargs
        )
        
        # Per-application context, reached through dependencies
        app.state.settings = settings
        app.state.db = Database(settings.DATABASE_URL, echo_sql=settings.ECHO_SQL)
        app.state.upstream = UpstreamClient(settings, transport=upstream_transport)

        if not settings.has_crmls_credentials:
            logger.warning("CRMLS credentials are not configured; proxy requests will fail")

        (
            MiddlewareManager()
            .configure_cors(
                allow_origins=settings.CORS_ORIGINS,
                allow_methods=settings.CORS_METHODS,
                allow_headers=settings.CORS_HEADERS,
            )
            .configure_logging(excluded_paths=settings.LOG_EXCLUDED_PATHS)
            .configure_timing()
            .apply_to_app(app)
        )

        app.add_exception_handler(CRMLSError, crmls_error_handler)
        app.include_router(api_router)

        @app.get("/health", include_in_schema=True)
        async def health_check(request: Request):
            """Health check endpoint."""
            database: Database = request.app.state.db
            connected = await database.health_check()
            return {
                "status": "ok",
                "database": "connected" if connected else "disconnected",
            }

        logger.info("Application initialization complete")
        return app

    except Exception as e:
        logger.critical(f"Failed to create application: {e}", exc_info=True)
        raise


__all__ = ['RealtyAPI', 'create_app', 'crmls_error_handler', '__version__']
