from fastapi import APIRouter

from shipspace.schemas.catalog import CatalogOut
from shipspace.services.catalog import get_catalog

router = APIRouter()


@router.get("/catalog", response_model=CatalogOut)
async def catalog() -> CatalogOut:
    return CatalogOut(**get_catalog())
