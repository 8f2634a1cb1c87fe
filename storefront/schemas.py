from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel
from typing import Annotated, Optional, List, Literal
from datetime import datetime

from storefront.config import settings

# Catalog keys are 32-bit integer columns
MAX_STORE_ID = 2**31 - 1

StoreId = Annotated[int, Field(ge=-MAX_STORE_ID - 1, le=MAX_STORE_ID)]


SortBy = Literal["price", "rating", "newest", "popular", "name", "discount"]
SortOrder = Literal["asc", "desc"]


class CamelModel(BaseModel):
    """Base for payloads exposed with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Query Schemas
class ProductListQuery(CamelModel):
    model_config = ConfigDict(extra="ignore")

    # Pagination
    page: int = Field(1, ge=1, le=MAX_STORE_ID, description="Page number")
    page_size: int = Field(
        settings.default_page_size, ge=1, le=settings.max_page_size, description="Items per page"
    )

    # Filters
    category_id: Optional[StoreId] = Field(None, description="Filter by category ID")
    brand_id: Optional[List[StoreId]] = Field(None, description="Filter by brand IDs (comma-separated)")
    min_price: Optional[float] = Field(None, ge=0, description="Minimum effective price")
    max_price: Optional[float] = Field(None, ge=0, description="Maximum effective price")
    min_rating: Optional[float] = Field(None, ge=1, le=5, description="Minimum average rating (1-5)")

    # Sorting
    sort_by: SortBy = Field("newest", description="Sort by field")
    sort_order: SortOrder = Field("desc", description="Sort order")

    search: Optional[str] = Field(None, description="Case-insensitive product name search")

    is_featured: Optional[bool] = None
    is_new: Optional[bool] = None
    is_bestseller: Optional[bool] = None
    is_active: bool = True

    @model_validator(mode="before")
    @classmethod
    def drop_empty_values(cls, data):
        # Empty query string values behave as if the parameter was never sent
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v != ""}
        return data

    @field_validator("brand_id", mode="before")
    @classmethod
    def split_brand_ids(cls, v):
        if isinstance(v, str):
            return [part.strip() for part in v.split(",") if part.strip()]
        return v

    @field_validator("is_featured", "is_new", "is_bestseller", mode="before")
    @classmethod
    def parse_flag(cls, v):
        # Only the literal "true" turns a flag filter on
        if isinstance(v, str):
            return True if v == "true" else None
        return v

    @field_validator("is_active", mode="before")
    @classmethod
    def parse_is_active(cls, v):
        if isinstance(v, str):
            return v == "true"
        return v

    def echo_filters(self) -> "ProductFilters":
        return ProductFilters(
            category_id=self.category_id,
            brand_id=self.brand_id,
            min_price=self.min_price,
            max_price=self.max_price,
            min_rating=self.min_rating,
            search=self.search,
            is_featured=self.is_featured,
            is_new=self.is_new,
            is_bestseller=self.is_bestseller,
        )


# Nested catalog references
class CategorySummary(CamelModel):
    id: int
    name: str
    slug: str


class CategoryRef(CategorySummary):
    image_url: Optional[str] = None


class BrandSummary(CamelModel):
    id: int
    name: str
    slug: str
    logo: Optional[str] = None


class BrandRef(BrandSummary):
    description: Optional[str] = None


# Product Schemas
class ProductListItem(CamelModel):
    id: int
    name: str
    slug: str
    short_description: Optional[str] = None
    original_price: float
    sale_price: Optional[float] = None
    final_price: float
    discount_percent: int
    stock_quantity: int
    sold_quantity: int
    is_featured: bool
    is_new: bool
    is_bestseller: bool
    average_rating: float
    total_reviews: int
    primary_image: Optional[str] = None
    category: Optional[CategorySummary] = None
    brand: Optional[BrandSummary] = None
    created_at: Optional[datetime] = None


class ProductImageItem(CamelModel):
    image_id: int
    image_url: str
    alt_text: Optional[str] = None
    is_primary: bool
    display_order: int


class ProductDetail(CamelModel):
    id: int
    name: str
    slug: str
    sku: Optional[str] = None
    description: Optional[str] = None
    short_description: Optional[str] = None
    original_price: float
    sale_price: Optional[float] = None
    final_price: float
    discount_percent: int
    stock_quantity: int
    sold_quantity: int
    view_count: int
    is_featured: bool
    is_new: bool
    is_bestseller: bool
    is_active: bool
    video_url: Optional[str] = None
    average_rating: float
    total_reviews: int
    category: Optional[CategoryRef] = None
    brand: Optional[BrandRef] = None
    images: List[ProductImageItem] = []
    created_at: Optional[datetime] = None


# Pagination Schemas
class PaginationMeta(CamelModel):
    page: int
    page_size: int
    total_items: int
    total_pages: int
    has_next_page: bool
    has_previous_page: bool


class ProductFilters(CamelModel):
    category_id: Optional[int] = None
    brand_id: Optional[List[int]] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    min_rating: Optional[float] = None
    search: Optional[str] = None
    is_featured: Optional[bool] = None
    is_new: Optional[bool] = None
    is_bestseller: Optional[bool] = None


class ProductListData(CamelModel):
    products: List[ProductListItem]
    pagination: PaginationMeta
    filters: ProductFilters


# Category / Brand Schemas
class CategoryDetail(CategoryRef):
    parent_id: Optional[int] = None
    description: Optional[str] = None
    display_order: int = 0


# Health
class HealthStatus(BaseModel):
    status: str
    timestamp: datetime
    uptime: float
