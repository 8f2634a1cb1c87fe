from typing import List

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from storefront.core.errors import NotFoundError
from storefront.repositories import BrandRepository
from storefront.schemas import BrandRef
from storefront.serializers import serialize_brand


class BrandService:

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def get_brands(self) -> List[BrandRef]:
        async with self.session_factory() as session:
            result = await session.execute(BrandRepository.active_statement())
            return [serialize_brand(brand) for brand in result.scalars().all()]

    async def get_brand_by_id(self, brand_id: int) -> BrandRef:
        async with self.session_factory() as session:
            result = await session.execute(BrandRepository.by_id_statement(brand_id))
            brand = result.scalar_one_or_none()

        if brand is None:
            raise NotFoundError("BRAND_NOT_FOUND", "Brand not found")
        return serialize_brand(brand)
