from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, Numeric, ForeignKey, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from storefront.database import Base


class Category(Base):
    __tablename__ = "categories"

    id = Column("category_id", Integer, primary_key=True)
    parent_id = Column(Integer, ForeignKey("categories.category_id"), nullable=True)
    name = Column("category_name", String(255), nullable=False)
    slug = Column(String(255), nullable=False, unique=True)
    description = Column(String(1000), nullable=True)
    image_url = Column(String(500), nullable=True)
    display_order = Column(Integer, default=0, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    parent = relationship("Category", remote_side=[id])

    __table_args__ = (
        Index("idx_categories_parent_id", "parent_id"),
        Index("idx_categories_is_active", "is_active"),
        Index("idx_categories_display_order", "display_order"),
    )

    def __repr__(self):
        return f"<Category(id={self.id}, slug='{self.slug}')>"


class Brand(Base):
    __tablename__ = "brands"

    id = Column("brand_id", Integer, primary_key=True)
    name = Column("brand_name", String(255), nullable=False)
    slug = Column(String(255), nullable=False, unique=True)
    description = Column(String(1000), nullable=True)
    logo_url = Column(String(500), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (
        Index("idx_brands_is_active", "is_active"),
    )

    def __repr__(self):
        return f"<Brand(id={self.id}, slug='{self.slug}')>"


class Product(Base):
    __tablename__ = "products"

    id = Column("product_id", Integer, primary_key=True)
    category_id = Column(Integer, ForeignKey("categories.category_id"), nullable=False)
    brand_id = Column(Integer, ForeignKey("brands.brand_id"), nullable=True)
    name = Column("product_name", String(500), nullable=False)
    slug = Column(String(500), nullable=False, unique=True)
    sku = Column(String(100), nullable=True, unique=True)
    description = Column(Text, nullable=True)
    short_description = Column(String(1000), nullable=True)
    original_price = Column(Numeric(15, 2), nullable=False)
    # Convention is sale_price <= original_price; not enforced by the store
    sale_price = Column(Numeric(15, 2), nullable=True)
    discount_percent = Column(Integer, default=0, nullable=False)
    stock_quantity = Column(Integer, default=0, nullable=False)
    sold_quantity = Column(Integer, default=0, nullable=False)
    view_count = Column(Integer, default=0, nullable=False)
    is_featured = Column(Boolean, default=False, nullable=False)
    is_new = Column(Boolean, default=False, nullable=False)
    is_bestseller = Column(Boolean, default=False, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    video_url = Column(String(500), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    category = relationship("Category")
    brand = relationship("Brand")
    images = relationship("ProductImage", back_populates="product", cascade="all, delete-orphan")
    reviews = relationship("ProductReview", back_populates="product", cascade="all, delete-orphan")

    __table_args__ = (
        Index("idx_products_category_id", "category_id"),
        Index("idx_products_brand_id", "brand_id"),
        Index("idx_products_is_active", "is_active"),
        Index("idx_products_is_featured", "is_featured"),
        Index("idx_products_is_new", "is_new"),
        Index("idx_products_is_bestseller", "is_bestseller"),
        Index("idx_products_sale_price", "sale_price"),
        Index("idx_products_created_at", "created_at"),
    )

    def __repr__(self):
        return f"<Product(id={self.id}, name='{self.name}', slug='{self.slug}')>"


class ProductImage(Base):
    __tablename__ = "product_images"

    id = Column("image_id", Integer, primary_key=True)
    product_id = Column(Integer, ForeignKey("products.product_id", ondelete="CASCADE"), nullable=False)
    image_url = Column(String(500), nullable=False)
    alt_text = Column(String(255), nullable=True)
    display_order = Column(Integer, default=0, nullable=False)
    # At most one primary image per product is expected but not enforced
    is_primary = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    product = relationship("Product", back_populates="images")

    __table_args__ = (
        Index("idx_product_images_product_id", "product_id"),
        Index("idx_product_images_is_primary", "is_primary"),
    )


class ProductReview(Base):
    __tablename__ = "product_reviews"

    id = Column("review_id", Integer, primary_key=True)
    product_id = Column(Integer, ForeignKey("products.product_id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Integer, nullable=False)
    order_id = Column(Integer, nullable=True)
    rating = Column(Integer, nullable=False)
    title = Column(String(255), nullable=True)
    comment = Column(Text, nullable=True)
    is_approved = Column(Boolean, default=False, nullable=False)
    is_verified_purchase = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    product = relationship("Product", back_populates="reviews")

    __table_args__ = (
        Index("idx_product_reviews_product_id", "product_id"),
        Index("idx_product_reviews_rating", "rating"),
        Index("idx_product_reviews_is_approved", "is_approved"),
    )
