from fastapi import APIRouter, Depends, Path

from storefront.api.deps import get_product_list_query, get_product_service
from storefront.core.responses import ApiResponse, api_success
from storefront.schemas import ProductDetail, ProductListData, ProductListQuery
from storefront.services import ProductCatalogService

router = APIRouter(prefix="/products", tags=["products"])


@router.get("", response_model=ApiResponse[ProductListData])
async def list_products(
    query: ProductListQuery = Depends(get_product_list_query),
    service: ProductCatalogService = Depends(get_product_service),
):
    """List products with filtering, sorting and pagination."""
    return api_success(await service.get_products(query))


@router.get("/{identifier}", response_model=ApiResponse[ProductDetail])
async def get_product(
    identifier: str = Path(..., min_length=1, description="Product ID or slug"),
    service: ProductCatalogService = Depends(get_product_service),
):
    """Get a single product by numeric ID or slug."""
    return api_success(await service.get_product_detail(identifier))
