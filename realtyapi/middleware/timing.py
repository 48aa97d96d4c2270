from .base import RealtyMiddleware
from fastapi import Request, Response
import time

class TimingMiddleware(RealtyMiddleware):
    """
    Middleware for measuring request processing time.
    
    Adds the time spent handling each request to the response headers.
    """
    
    def __init__(self, app, time_header: str = "X-Process-Time", **kwargs):
        """
        Initialize the timing middleware.
        
        Args:
            app: The FastAPI application
            time_header: Header name to use for the process time (default: "X-Process-Time")
        """
        self.time_header = time_header
        super().__init__(app, **kwargs)
        
    async def before_request(self, request: Request) -> None:
        request.state.timing_start = time.perf_counter()
        
    async def after_response(self, request: Request, response: Response) -> Response:
        process_time = time.perf_counter() - request.state.timing_start
        response.headers[self.time_header] = f"{process_time:.4f} sec"
        return response
