"""
API routers for the Realty API.
"""
from fastapi import APIRouter

from .crmls import router as crmls_router
from .favorites import router as favorites_router
from .leads import router as leads_router

api_router = APIRouter()
api_router.include_router(crmls_router)
api_router.include_router(favorites_router)
api_router.include_router(leads_router)

__all__ = ['api_router', 'crmls_router', 'favorites_router', 'leads_router']
