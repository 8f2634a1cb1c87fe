from typing import List

from fastapi import APIRouter, Depends

from storefront.api.deps import get_brand_service
from storefront.core.responses import ApiResponse, api_success
from storefront.schemas import BrandRef
from storefront.services import BrandService

router = APIRouter(prefix="/brands", tags=["brands"])


@router.get("", response_model=ApiResponse[List[BrandRef]])
async def list_brands(service: BrandService = Depends(get_brand_service)):
    """List active brands."""
    return api_success(await service.get_brands())


@router.get("/{brand_id}", response_model=ApiResponse[BrandRef])
async def get_brand(brand_id: int, service: BrandService = Depends(get_brand_service)):
    return api_success(await service.get_brand_by_id(brand_id))
