import os

# Keep module-level engines off Postgres while the test suite imports the app
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./storefront-test.db")

from datetime import datetime, timedelta
from decimal import Decimal

import pytest
from httpx import ASGITransport, AsyncClient

from storefront.database import Base, build_async_engine, build_session_factory, get_session_factory
from storefront.main import app
from storefront.models import Brand, Category, Product, ProductImage, ProductReview
from storefront.services import BrandService, CategoryService, ProductCatalogService

BASE_TIME = datetime(2026, 1, 1, 9, 0, 0)


def approved(product_id, *ratings):
    return [
        ProductReview(product_id=product_id, user_id=100 + i, rating=rating, is_approved=True)
        for i, rating in enumerate(ratings)
    ]


@pytest.fixture
async def engine(tmp_path):
    engine = build_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'catalog.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def session_factory(engine):
    factory = build_session_factory(engine)
    async with factory() as session:
        session.add_all([
            Category(id=1, name="Phones", slug="phones", display_order=1, image_url="/img/phones.png"),
            Category(id=2, name="Laptops", slug="laptops", display_order=0, description="Portable computers"),
            Category(id=3, name="Archived", slug="archived", display_order=2, is_active=False),
            Brand(id=1, name="Acme", slug="acme", logo_url="/img/acme.png", description="Acme devices"),
            Brand(id=2, name="Globex", slug="globex"),
            Brand(id=3, name="Initech", slug="initech", is_active=False),
        ])
        await session.flush()

        session.add_all([
            Product(
                id=1, category_id=1, brand_id=1, name="Smartphone X", slug="smartphone-x", sku="SPX-1",
                description="Flagship phone", short_description="Flagship",
                original_price=Decimal("1000000"), sale_price=Decimal("800000"), discount_percent=20,
                stock_quantity=15, sold_quantity=50, view_count=7, is_featured=True, is_new=True,
                video_url="https://videos.example.com/spx", created_at=BASE_TIME,
            ),
            Product(
                id=2, category_id=1, brand_id=2, name="Headphones Pro", slug="headphones-pro",
                original_price=Decimal("300000"), discount_percent=0, sold_quantity=120,
                is_bestseller=True, created_at=BASE_TIME + timedelta(days=1),
            ),
            Product(
                id=3, category_id=2, brand_id=1, name="Laptop Air", slug="laptop-air",
                original_price=Decimal("2500000"), sale_price=Decimal("2000000"), discount_percent=10,
                sold_quantity=10, created_at=BASE_TIME + timedelta(days=2),
            ),
            Product(
                id=4, category_id=2, brand_id=None, name="Budget Laptop", slug="budget-laptop",
                original_price=Decimal("500000"), discount_percent=0, sold_quantity=5, is_new=True,
                created_at=BASE_TIME + timedelta(days=3),
            ),
            Product(
                id=5, category_id=1, brand_id=2, name="Retired Phone", slug="retired-phone",
                original_price=Decimal("100000"), is_active=False, created_at=BASE_TIME + timedelta(days=4),
            ),
        ])
        await session.flush()

        session.add_all([
            # Gallery rows inserted out of display order on purpose
            ProductImage(product_id=1, image_url="img1-back.png", display_order=1, is_primary=False),
            ProductImage(product_id=1, image_url="img1.png", alt_text="Front", display_order=0, is_primary=True),
            ProductImage(product_id=2, image_url="headphones.png", display_order=0, is_primary=True),
            ProductImage(product_id=4, image_url="budget-side.png", display_order=0, is_primary=False),
        ])
        session.add_all(approved(1, 4, 5))
        session.add(ProductReview(product_id=1, user_id=99, rating=1, is_approved=False))
        session.add_all(approved(2, 4, 4, 4, 4, 4, 4, 4, 4, 4, 3))
        session.add_all(approved(4, 5))
        await session.commit()

    return factory


@pytest.fixture
def product_service(session_factory):
    return ProductCatalogService(session_factory)


@pytest.fixture
def category_service(session_factory):
    return CategoryService(session_factory)


@pytest.fixture
def brand_service(session_factory):
    return BrandService(session_factory)


@pytest.fixture
async def client(session_factory):
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
