from storefront.services.brand_service import BrandService
from storefront.services.category_service import CategoryService
from storefront.services.product_service import ProductCatalogService

__all__ = ["BrandService", "CategoryService", "ProductCatalogService"]
