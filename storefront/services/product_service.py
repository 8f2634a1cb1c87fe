import asyncio
from typing import Awaitable, Callable, Dict, List, Optional, Sequence

from sqlalchemy.engine import Row
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from storefront.core.errors import NotFoundError
from storefront.core.logging import get_logger
from storefront.repositories import ProductRepository
from storefront.schemas import ProductDetail, ProductListData, ProductListQuery
from storefront.serializers import build_pagination, serialize_product_detail, serialize_product_list_item

logger = get_logger(__name__)

ViewRecorder = Callable[[int], Awaitable[None]]


class ProductCatalogService:
    """
    Application service for product listing and detail lookups.

    The service holds no per-request state: it is built with a session
    factory, and each store round-trip opens its own session so independent
    reads can run concurrently.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        view_recorder: Optional[ViewRecorder] = None,
    ):
        self.session_factory = session_factory
        self.view_recorder = view_recorder or self.increment_view_count

    async def get_products(self, query: ProductListQuery) -> ProductListData:
        """
        List products matching the query, one page at a time.

        The page and the total count are fetched concurrently. When min_rating
        is set the page is filtered after the fetch, but pagination totals
        still come from the unfiltered count, so totalItems may include
        products that are not returned.
        """
        conditions = ProductRepository.build_conditions(query)
        order_by = ProductRepository.resolve_ordering(query.sort_by, query.sort_order)
        offset = (query.page - 1) * query.page_size

        rows, total_items = await asyncio.gather(
            self._fetch_page(conditions, order_by, query.page_size, offset),
            self._count(conditions),
        )

        if query.min_rating is not None:
            rows = [row for row in rows if float(row.average_rating) >= query.min_rating]

        primary_images = await self.fetch_primary_images([row.Product.id for row in rows])

        products = [
            serialize_product_list_item(
                row.Product,
                row.Category,
                row.Brand,
                row.average_rating,
                row.total_reviews,
                primary_images.get(row.Product.id),
            )
            for row in rows
        ]
        logger.debug(
            "Listed %d products (page=%d, page_size=%d, total=%d)",
            len(products), query.page, query.page_size, total_items,
        )

        return ProductListData(
            products=products,
            pagination=build_pagination(query.page, query.page_size, total_items),
            filters=query.echo_filters(),
        )

    async def _fetch_page(self, conditions, order_by, limit: int, offset: int) -> List[Row]:
        async with self.session_factory() as session:
            result = await session.execute(
                ProductRepository.listing_statement(conditions, order_by, limit, offset)
            )
            return list(result.all())

    async def _count(self, conditions) -> int:
        async with self.session_factory() as session:
            result = await session.execute(ProductRepository.count_statement(conditions))
            return result.scalar() or 0

    async def fetch_primary_images(self, product_ids: Sequence[int]) -> Dict[int, str]:
        """
        Map product id to its primary image URL in one query.

        If a product has several primary images, which one ends up in the map
        is undefined. Products without one are simply absent.
        """
        if not product_ids:
            return {}

        async with self.session_factory() as session:
            result = await session.execute(ProductRepository.primary_images_statement(product_ids))
            return {product_id: image_url for product_id, image_url in result.all()}

    async def get_product_detail(self, identifier: str) -> ProductDetail:
        """Fetch one product by numeric id or slug, with its full image gallery."""
        async with self.session_factory() as session:
            result = await session.execute(ProductRepository.detail_statement(identifier))
            row = result.first()
            if row is None:
                raise NotFoundError("PRODUCT_NOT_FOUND", "Product not found")

            images = (
                await session.execute(ProductRepository.gallery_statement(row.Product.id))
            ).scalars().all()

        # Payload carries the view count read above, not the incremented one
        detail = serialize_product_detail(
            row.Product,
            row.Category,
            row.Brand,
            row.average_rating,
            row.total_reviews,
            images,
        )
        await self.record_view(row.Product.id)
        return detail

    async def record_view(self, product_id: int) -> None:
        try:
            await self.view_recorder(product_id)
        except Exception:
            # View counts are best effort and never fail a read
            logger.warning("Failed to record view for product %s", product_id, exc_info=True)

    async def increment_view_count(self, product_id: int) -> None:
        async with self.session_factory() as session:
            await session.execute(ProductRepository.increment_view_count_statement(product_id))
            await session.commit()
