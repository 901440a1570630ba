"""
API v1 router aggregation
Combines all v1 route handlers into a single router
Reference: https://fastapi.tiangolo.com/tutorial/bigger-applications/
"""
from fastapi import APIRouter

from storefront.api.v1.routes import auth, business, dashboard, health, products, public, upload
from storefront.core.config import settings


# All v1 routes are prefixed with /api/v1
api_router = APIRouter(prefix=settings.API_V1_PREFIX)

api_router.include_router(auth.router)
api_router.include_router(products.router)
api_router.include_router(business.router)
api_router.include_router(dashboard.router)
api_router.include_router(public.router)
api_router.include_router(upload.router)
api_router.include_router(health.router)
