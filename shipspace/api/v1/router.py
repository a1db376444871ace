from fastapi import APIRouter

from shipspace.api.v1.endpoints.health import router as health_router
from shipspace.api.v1.endpoints.me import router as me_router
from shipspace.api.v1.endpoints.catalog import router as catalog_router
from shipspace.api.v1.endpoints.listings import router as listings_router
from shipspace.api.v1.endpoints.admin import router as admin_router
from shipspace.api.v1.endpoints.users import router as users_router
from shipspace.api.v1.endpoints.internal import router as internal_router


router = APIRouter(prefix="/v1")
router.include_router(health_router, tags=["health"])
router.include_router(me_router, tags=["me"])
router.include_router(catalog_router, tags=["catalog"])
router.include_router(listings_router, tags=["listings"])
router.include_router(admin_router, tags=["moderation"])
router.include_router(users_router, tags=["users"])
router.include_router(internal_router, tags=["internal"])
