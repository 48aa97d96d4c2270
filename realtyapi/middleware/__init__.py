# middleware/__init__.py
"""
Realty API middleware stack: CORS, request logging and timing.
"""
from typing import List, Dict, Any, Optional, Union
from fastapi import FastAPI
import logging as log

from .base import RealtyMiddleware
from .cors import CORSMiddleware
from .logging import LoggingMiddleware
from .timing import TimingMiddleware

logger = log.getLogger("realtyapi.middleware")

class MiddlewareManager:
    """Collects middleware configuration and applies it to an app.

    Middlewares run in the order they were added: the first one added sees
    the request first and the response last.
    """
    
    def __init__(self):
        self.middlewares: List[Dict[str, Any]] = []
        self._builtin_middlewares = {
            'cors': CORSMiddleware,
            'logging': LoggingMiddleware,
            'timing': TimingMiddleware,
        }
    
    def add_middleware(
        self,
        middleware_class: Union[str, type],
        **options
    ) -> 'MiddlewareManager':
        """Add middleware to the stack."""
        if isinstance(middleware_class, str):
            if middleware_class not in self._builtin_middlewares:
                raise ValueError(f"Unknown middleware: {middleware_class}")
            middleware_class = self._builtin_middlewares[middleware_class]
        
        self.middlewares.append({
            'class': middleware_class,
            'options': options
        })
        return self
    
    def configure_cors(
        self,
        enabled: bool = True,
        allow_origins: Optional[List[str]] = None,
        allow_methods: Optional[List[str]] = None,
        allow_headers: Optional[List[str]] = None,
    ) -> 'MiddlewareManager':
        """Configure CORS middleware."""
        if enabled:
            return self.add_middleware(
                'cors',
                allow_origins=allow_origins or ["*"],
                allow_methods=allow_methods or ["GET", "POST", "OPTIONS"],
                allow_headers=allow_headers or ["Content-Type", "Authorization"],
            )
        return self
    
    def configure_logging(
        self,
        enabled: bool = True,
        log_methods: Optional[List[str]] = None,
        excluded_paths: Optional[List[str]] = None,
        **kwargs
    ) -> 'MiddlewareManager':
        """Configure logging middleware."""
        if enabled:
            options = {
                'log_methods': set(log_methods) if log_methods else None,
                'excluded_paths': excluded_paths if excluded_paths is not None else ['/health'],
                **kwargs
            }
            return self.add_middleware('logging', **options)
        return self
    
    def configure_timing(self, enabled: bool = True, time_header: str = "X-Process-Time") -> 'MiddlewareManager':
        if enabled:
            return self.add_middleware('timing', time_header=time_header)
        return self
    
    def apply_to_app(self, app: FastAPI) -> None:
        """Apply all configured middlewares to the FastAPI app."""
        # Starlette wraps the last added middleware outermost
        for middleware_config in reversed(self.middlewares):
            middleware_class = middleware_config['class']
            options = middleware_config['options']
            
            try:
                app.add_middleware(middleware_class, **options)
                logger.info(f"Added middleware: {middleware_class.__name__}")
            except Exception as e:
                logger.error(f"Failed to add middleware {middleware_class.__name__}: {e}")
                raise

__all__ = [
    'MiddlewareManager',
    'RealtyMiddleware',
    'CORSMiddleware',
    'LoggingMiddleware',
    'TimingMiddleware',
]
