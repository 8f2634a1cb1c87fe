"""
Statement builders for catalog queries.

Repositories here only compose SQLAlchemy statements; services own the
sessions and execute them.
"""
from decimal import Decimal
from typing import List, Sequence

from sqlalchemy import and_, asc, desc, false, func, or_, select, update
from sqlalchemy.sql.elements import ColumnElement

from storefront.models import Brand, Category, Product, ProductImage, ProductReview
from storefront.schemas import MAX_STORE_ID, ProductListQuery


def key_equals(column, value: int) -> ColumnElement[bool]:
    # Keys outside the 32-bit range cannot exist and would overflow the driver
    if -MAX_STORE_ID - 1 <= value <= MAX_STORE_ID:
        return column == value
    return false()


class ProductRepository:
    """Data-access abstraction for product catalog queries."""

    @staticmethod
    def effective_price():
        return func.coalesce(Product.sale_price, Product.original_price)

    @staticmethod
    def average_rating():
        """Approved-review average per product row, 0 when there are none."""
        subquery = (
            select(func.avg(ProductReview.rating))
            .where(ProductReview.product_id == Product.id, ProductReview.is_approved.is_(True))
            .correlate(Product)
            .scalar_subquery()
        )
        return func.coalesce(subquery, 0)

    @staticmethod
    def review_count():
        subquery = (
            select(func.count(ProductReview.id))
            .where(ProductReview.product_id == Product.id, ProductReview.is_approved.is_(True))
            .correlate(Product)
            .scalar_subquery()
        )
        return func.coalesce(subquery, 0)

    @staticmethod
    def _price_bound(bound: float, op: str) -> ColumnElement[bool]:
        bound = Decimal(str(bound))

        def compare(column):
            return column >= bound if op == "gte" else column <= bound

        return or_(
            and_(Product.sale_price.is_not(None), compare(Product.sale_price)),
            and_(Product.sale_price.is_(None), compare(Product.original_price)),
        )

    @classmethod
    def build_conditions(cls, query: ProductListQuery) -> List[ColumnElement[bool]]:
        """
        Translate a validated listing query into predicates joined with AND.

        min_rating is intentionally absent: it filters on an aggregate and is
        applied to the fetched page instead.
        """
        conditions = [Product.is_active == query.is_active]

        if query.category_id is not None:
            conditions.append(Product.category_id == query.category_id)

        if query.brand_id:
            conditions.append(Product.brand_id.in_(query.brand_id))

        # Price bounds apply to the effective price without a computed column
        if query.min_price is not None:
            conditions.append(cls._price_bound(query.min_price, "gte"))

        if query.max_price is not None:
            conditions.append(cls._price_bound(query.max_price, "lte"))

        if query.is_featured is not None:
            conditions.append(Product.is_featured == query.is_featured)
        if query.is_new is not None:
            conditions.append(Product.is_new == query.is_new)
        if query.is_bestseller is not None:
            conditions.append(Product.is_bestseller == query.is_bestseller)

        if query.search:
            # Wildcard characters in the search text match literally
            conditions.append(Product.name.icontains(query.search, autoescape=True))

        return conditions

    @classmethod
    def resolve_ordering(cls, sort_by: str, sort_order: str = "desc"):
        """
        Map a sort key onto a single ORDER BY expression.

        popular and discount always sort descending. Unknown keys fall back to
        newest. There is no tie-break column, so equal keys keep store order.
        """
        direction = asc if sort_order == "asc" else desc

        if sort_by == "price":
            return direction(cls.effective_price())
        if sort_by == "rating":
            return direction(cls.average_rating())
        if sort_by == "popular":
            return desc(Product.sold_quantity)
        if sort_by == "discount":
            return desc(Product.discount_percent)
        if sort_by == "name":
            return direction(Product.name)
        return desc(Product.created_at)

    @classmethod
    def enriched_select(cls):
        """Products joined with category and brand plus rating aggregates."""
        return (
            select(
                Product,
                Category,
                Brand,
                cls.average_rating().label("average_rating"),
                cls.review_count().label("total_reviews"),
            )
            .outerjoin(Category, Product.category_id == Category.id)
            .outerjoin(Brand, Product.brand_id == Brand.id)
        )

    @classmethod
    def listing_statement(cls, conditions: Sequence[ColumnElement[bool]], order_by, limit: int, offset: int):
        return cls.enriched_select().where(*conditions).order_by(order_by).limit(limit).offset(offset)

    @staticmethod
    def count_statement(conditions: Sequence[ColumnElement[bool]]):
        return select(func.count()).select_from(Product).where(*conditions)

    @classmethod
    def detail_statement(cls, identifier: str):
        if identifier.isascii() and identifier.isdigit():
            condition = key_equals(Product.id, int(identifier))
        else:
            condition = Product.slug == identifier
        return cls.enriched_select().where(condition).limit(1)

    @staticmethod
    def primary_images_statement(product_ids: Sequence[int]):
        return select(ProductImage.product_id, ProductImage.image_url).where(
            ProductImage.product_id.in_(product_ids),
            ProductImage.is_primary.is_(True),
        )

    @staticmethod
    def gallery_statement(product_id: int):
        return (
            select(ProductImage)
            .where(ProductImage.product_id == product_id)
            .order_by(asc(ProductImage.display_order))
        )

    @staticmethod
    def increment_view_count_statement(product_id: int):
        return (
            update(Product)
            .where(Product.id == product_id)
            .values(view_count=Product.view_count + 1)
        )


class CategoryRepository:

    @staticmethod
    def active_statement():
        return (
            select(Category)
            .where(Category.is_active.is_(True))
            .order_by(Category.display_order, Category.name)
        )

    @staticmethod
    def by_id_statement(category_id: int):
        return select(Category).where(key_equals(Category.id, category_id)).limit(1)


class BrandRepository:

    @staticmethod
    def active_statement():
        return select(Brand).where(Brand.is_active.is_(True)).order_by(Brand.name)

    @staticmethod
    def by_id_statement(brand_id: int):
        return select(Brand).where(key_equals(Brand.id, brand_id)).limit(1)
