from fastapi import APIRouter

from app.inventory.routers.auth import router as auth_router
from app.inventory.routers.health import router as health_router
from app.inventory.routers.products import router as products_router
from app.inventory.routers.stores import router as stores_router

api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(auth_router, prefix="/api/auth", tags=["auth"])
api_router.include_router(products_router, prefix="/api/products", tags=["products"])
api_router.include_router(stores_router, prefix="/api/stores", tags=["stores"])
