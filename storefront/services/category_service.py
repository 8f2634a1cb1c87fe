from typing import List

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from storefront.core.errors import NotFoundError
from storefront.repositories import CategoryRepository
from storefront.schemas import CategoryDetail, CategoryRef
from storefront.serializers import serialize_category, serialize_category_detail


class CategoryService:

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def get_categories(self) -> List[CategoryRef]:
        """Active categories in display order, then by name."""
        async with self.session_factory() as session:
            result = await session.execute(CategoryRepository.active_statement())
            return [serialize_category(category) for category in result.scalars().all()]

    async def get_category_by_id(self, category_id: int) -> CategoryDetail:
        async with self.session_factory() as session:
            result = await session.execute(CategoryRepository.by_id_statement(category_id))
            category = result.scalar_one_or_none()

        if category is None:
            raise NotFoundError("CATEGORY_NOT_FOUND", "Category not found")
        return serialize_category_detail(category)
