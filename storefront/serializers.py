"""Pure helpers shaping catalog rows into API payloads."""
import math
from decimal import Decimal
from typing import Iterable, Optional, Union

from storefront.models import Brand, Category, Product, ProductImage
from storefront.schemas import (
    BrandRef,
    BrandSummary,
    CategoryDetail,
    CategoryRef,
    CategorySummary,
    PaginationMeta,
    ProductDetail,
    ProductImageItem,
    ProductListItem,
)

RATING_PRECISION = 2

Number = Union[Decimal, float, int]


def to_number(value: Optional[Number]) -> Optional[float]:
    if value is None:
        return None
    return float(value)


def final_price(original_price: Number, sale_price: Optional[Number]) -> float:
    """Effective price: the sale price when one is set, otherwise the original price."""
    if sale_price is not None:
        return float(sale_price)
    return float(original_price)


def round_rating(value: Optional[Number]) -> float:
    return round(float(value or 0), RATING_PRECISION)


def build_pagination(page: int, page_size: int, total_items: int) -> PaginationMeta:
    total_pages = math.ceil(total_items / page_size)
    return PaginationMeta(
        page=page,
        page_size=page_size,
        total_items=total_items,
        total_pages=total_pages,
        has_next_page=page < total_pages,
        has_previous_page=page > 1,
    )


def serialize_category_summary(category: Optional[Category]) -> Optional[CategorySummary]:
    if category is None:
        return None
    return CategorySummary(id=category.id, name=category.name, slug=category.slug)


def serialize_category(category: Optional[Category]) -> Optional[CategoryRef]:
    if category is None:
        return None
    return CategoryRef(id=category.id, name=category.name, slug=category.slug, image_url=category.image_url)


def serialize_category_detail(category: Category) -> CategoryDetail:
    return CategoryDetail(
        id=category.id,
        parent_id=category.parent_id,
        name=category.name,
        slug=category.slug,
        description=category.description,
        image_url=category.image_url,
        display_order=category.display_order or 0,
    )


def serialize_brand_summary(brand: Optional[Brand]) -> Optional[BrandSummary]:
    if brand is None:
        return None
    return BrandSummary(id=brand.id, name=brand.name, slug=brand.slug, logo=brand.logo_url)


def serialize_brand(brand: Optional[Brand]) -> Optional[BrandRef]:
    if brand is None:
        return None
    return BrandRef(
        id=brand.id,
        name=brand.name,
        slug=brand.slug,
        logo=brand.logo_url,
        description=brand.description,
    )


def serialize_image(image: ProductImage) -> ProductImageItem:
    return ProductImageItem(
        image_id=image.id,
        image_url=image.image_url,
        alt_text=image.alt_text,
        is_primary=bool(image.is_primary),
        display_order=image.display_order or 0,
    )


def serialize_product_list_item(
    product: Product,
    category: Optional[Category],
    brand: Optional[Brand],
    average_rating: Optional[Number],
    total_reviews: Optional[Number],
    primary_image: Optional[str],
) -> ProductListItem:
    return ProductListItem(
        id=product.id,
        name=product.name,
        slug=product.slug,
        short_description=product.short_description,
        original_price=float(product.original_price),
        sale_price=to_number(product.sale_price),
        final_price=final_price(product.original_price, product.sale_price),
        discount_percent=product.discount_percent or 0,
        stock_quantity=product.stock_quantity or 0,
        sold_quantity=product.sold_quantity or 0,
        is_featured=bool(product.is_featured),
        is_new=bool(product.is_new),
        is_bestseller=bool(product.is_bestseller),
        average_rating=round_rating(average_rating),
        total_reviews=int(total_reviews or 0),
        primary_image=primary_image,
        category=serialize_category_summary(category),
        brand=serialize_brand_summary(brand),
        created_at=product.created_at,
    )


def serialize_product_detail(
    product: Product,
    category: Optional[Category],
    brand: Optional[Brand],
    average_rating: Optional[Number],
    total_reviews: Optional[Number],
    images: Iterable[ProductImage],
) -> ProductDetail:
    return ProductDetail(
        id=product.id,
        name=product.name,
        slug=product.slug,
        sku=product.sku,
        description=product.description,
        short_description=product.short_description,
        original_price=float(product.original_price),
        sale_price=to_number(product.sale_price),
        final_price=final_price(product.original_price, product.sale_price),
        discount_percent=product.discount_percent or 0,
        stock_quantity=product.stock_quantity or 0,
        sold_quantity=product.sold_quantity or 0,
        view_count=product.view_count or 0,
        is_featured=bool(product.is_featured),
        is_new=bool(product.is_new),
        is_bestseller=bool(product.is_bestseller),
        is_active=bool(product.is_active),
        video_url=product.video_url,
        average_rating=round_rating(average_rating),
        total_reviews=int(total_reviews or 0),
        category=serialize_category(category),
        brand=serialize_brand(brand),
        images=[serialize_image(image) for image in images],
        created_at=product.created_at,
    )
