# middleware/cors.py
"""CORS middleware for the Realty API."""
from .base import RealtyMiddleware
from fastapi.requests import Request
from fastapi.responses import Response
from typing import Dict, Optional

class CORSMiddleware(RealtyMiddleware):
    """Adds CORS headers to every response and answers preflight requests itself."""
    
    def setup(self):
        self.allow_origins = self.config.get('allow_origins', ["*"])
        self.allow_methods = self.config.get('allow_methods', ["GET", "POST", "OPTIONS"])
        self.allow_headers = self.config.get('allow_headers', ["Content-Type", "Authorization", "X-User-Id"])
    
    async def before_request(self, request: Request) -> Optional[Response]:
        """Answer preflight requests with 200 and an empty body."""
        if request.method == "OPTIONS":
            return Response(content=b"", status_code=200, headers=self._get_cors_headers(request))
        return None
    
    async def after_response(self, request: Request, response: Response) -> Response:
        """Add CORS headers to response."""
        for key, value in self._get_cors_headers(request).items():
            response.headers[key] = value
        return response
    
    def _get_cors_headers(self, request: Request) -> Dict[str, str]:
        """Generate CORS headers."""
        origin = request.headers.get("origin")
        headers = {}
        
        if self.allow_origins == ["*"]:
            headers["Access-Control-Allow-Origin"] = "*"
        elif origin and origin in self.allow_origins:
            headers["Access-Control-Allow-Origin"] = origin
            headers["Vary"] = "Origin"
        
        headers["Access-Control-Allow-Methods"] = ", ".join(self.allow_methods)
        headers["Access-Control-Allow-Headers"] = ", ".join(self.allow_headers)
        return headers
