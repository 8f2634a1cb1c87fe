from typing import List

from fastapi import APIRouter, Depends

from storefront.api.deps import get_category_service
from storefront.core.responses import ApiResponse, api_success
from storefront.schemas import CategoryDetail, CategoryRef
from storefront.services import CategoryService

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=ApiResponse[List[CategoryRef]])
async def list_categories(service: CategoryService = Depends(get_category_service)):
    """List active categories."""
    return api_success(await service.get_categories())


@router.get("/{category_id}", response_model=ApiResponse[CategoryDetail])
async def get_category(category_id: int, service: CategoryService = Depends(get_category_service)):
    return api_success(await service.get_category_by_id(category_id))
