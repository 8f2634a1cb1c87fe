from storefront.models.catalog import Brand, Category, Product, ProductImage, ProductReview

__all__ = ["Brand", "Category", "Product", "ProductImage", "ProductReview"]
