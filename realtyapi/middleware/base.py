# middleware/base.py
"""Base middleware class for the Realty API."""
from abc import ABC
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from typing import Callable, Optional
import time
import uuid

class RealtyMiddleware(BaseHTTPMiddleware, ABC):
    """Base class for Realty middlewares with request/response hooks."""
    
    def __init__(self, app, **kwargs):
        super().__init__(app)
        self.config = kwargs
        self.setup()
    
    def setup(self) -> None:
        """Override this method for middleware-specific setup."""
        pass
    
    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Main middleware dispatch method."""
        # Request state is shared by every middleware in the stack
        if not hasattr(request.state, "request_id"):
            request.state.request_id = str(uuid.uuid4())
            request.state.start_time = time.perf_counter()
        
        try:
            # A response from before_request short-circuits the app
            response = await self.before_request(request)
            if response is None:
                response = await call_next(request)
            return await self.after_response(request, response)
        except Exception as e:
            return await self.handle_exception(request, e)
    
    async def before_request(self, request: Request) -> Optional[Response]:
        """Called before the request is processed."""
        return None
    
    async def after_response(self, request: Request, response: Response) -> Response:
        """Called after the response is generated."""
        return response
    
    async def handle_exception(self, request: Request, exc: Exception) -> Response:
        """Handle exceptions that occur during request processing."""
        raise exc
