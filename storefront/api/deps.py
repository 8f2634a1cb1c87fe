from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from storefront.config import settings
from storefront.database import get_session_factory
from storefront.schemas import ProductListQuery
from storefront.services import BrandService, CategoryService, ProductCatalogService


def get_product_service(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> ProductCatalogService:
    view_recorder = None
    if settings.view_count_via_worker:
        from storefront.tasks.view_count import enqueue_view_increment
        view_recorder = enqueue_view_increment
    return ProductCatalogService(session_factory, view_recorder=view_recorder)


def get_category_service(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> CategoryService:
    return CategoryService(session_factory)


def get_brand_service(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> BrandService:
    return BrandService(session_factory)


def get_product_list_query(request: Request) -> ProductListQuery:
    """Validate raw query parameters; pydantic errors become VALIDATION_ERROR responses."""
    return ProductListQuery.model_validate(dict(request.query_params))
