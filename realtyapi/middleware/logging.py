# middleware/logging.py
from fastapi.responses import Response, JSONResponse
from fastapi.requests import Request
from .base import RealtyMiddleware
import time

from typing import List
import logging
import re

logger = logging.getLogger("realtyapi.middleware.logging")

class LoggingMiddleware(RealtyMiddleware):
    """Logs one line per request and tags responses with a request id."""
    
    def setup(self):
        self.log_methods = self.config.get('log_methods')
        self.excluded_paths = self.config.get('excluded_paths', [])
        self.request_id_header = self.config.get('request_id_header', "X-Request-ID")
        
        self._excluded_patterns = self._compile_patterns(self.excluded_paths)
    
    def _compile_patterns(self, paths: List[str]) -> List[re.Pattern]:
        """Compile regex patterns for path matching."""
        patterns = []
        for path in paths:
            try:
                if any(char in path for char in r'.*+?{}[]|()'):
                    patterns.append(re.compile(path))
                else:
                    patterns.append(re.compile(re.escape(path) + "$"))
            except re.error as e:
                logger.warning(f"Invalid regex pattern '{path}': {e}")
        return patterns
    
    def should_log_request(self, method: str, path: str) -> bool:
        """Determine if request should be logged."""
        if self.log_methods and method not in self.log_methods:
            return False
        return not any(pattern.match(path) for pattern in self._excluded_patterns)
    
    def _elapsed_ms(self, request: Request) -> float:
        return (time.perf_counter() - request.state.start_time) * 1000
    
    async def after_response(self, request: Request, response: Response) -> Response:
        """Log the request and attach the request id header."""
        request_id = request.state.request_id
        response.headers[self.request_id_header] = request_id
        
        if self.should_log_request(request.method, request.url.path):
            level = logging.WARNING if response.status_code >= 400 else logging.INFO
            logger.log(
                level,
                f"{request.method} {request.url.path} -> {response.status_code} "
                f"({self._elapsed_ms(request):.1f} ms) [{request_id}]",
                extra={
                    "request_id": request_id,
                    "client_ip": request.client.host if request.client else None,
                    "user_agent": request.headers.get("user-agent"),
                },
            )
        return response
    
    async def handle_exception(self, request: Request, exc: Exception) -> Response:
        """Log unhandled errors and answer with a JSON 500."""
        request_id = request.state.request_id
        logger.error(
            f"{request.method} {request.url.path} failed ({self._elapsed_ms(request):.1f} ms) "
            f"[{request_id}]: {exc}",
            exc_info=exc,
        )
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "message": str(exc)},
            headers={self.request_id_header: request_id},
        )
