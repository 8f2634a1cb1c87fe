from datetime import datetime
from decimal import Decimal

import pytest
from pydantic import ValidationError

from storefront.models import Brand, Category, Product
from storefront.repositories import ProductRepository
from storefront.schemas import ProductListQuery
from storefront.serializers import build_pagination, final_price, round_rating, serialize_product_list_item


class TestProductListQuery:

    def test_defaults(self):
        query = ProductListQuery.model_validate({})

        assert query.page == 1
        assert query.page_size == 20
        assert query.sort_by == "newest"
        assert query.sort_order == "desc"
        assert query.is_active is True
        assert query.is_featured is None

    def test_parses_raw_query_strings(self):
        query = ProductListQuery.model_validate({
            "page": "2",
            "pageSize": "10",
            "categoryId": "3",
            "brandId": "1, 2,3",
            "minPrice": "100000",
            "maxPrice": "500000",
            "minRating": "4",
            "sortBy": "price",
            "sortOrder": "asc",
            "search": "phone",
        })

        assert query.page == 2
        assert query.page_size == 10
        assert query.category_id == 3
        assert query.brand_id == [1, 2, 3]
        assert query.min_price == 100000
        assert query.max_price == 500000
        assert query.min_rating == 4
        assert query.sort_by == "price"
        assert query.search == "phone"

    @pytest.mark.parametrize("raw, expected", [("true", True), ("false", None), ("1", None)])
    def test_flags_only_activate_on_true(self, raw, expected):
        query = ProductListQuery.model_validate({"isFeatured": raw, "isNew": raw, "isBestseller": raw})

        assert query.is_featured is expected
        assert query.is_new is expected
        assert query.is_bestseller is expected

    @pytest.mark.parametrize("raw, expected", [("true", True), ("false", False), ("yes", False)])
    def test_is_active(self, raw, expected):
        assert ProductListQuery.model_validate({"isActive": raw}).is_active is expected

    def test_empty_values_count_as_absent(self):
        query = ProductListQuery.model_validate({"categoryId": "", "search": "", "isActive": "", "page": ""})

        assert query.category_id is None
        assert query.search is None
        assert query.is_active is True
        assert query.page == 1

    @pytest.mark.parametrize("params", [
        {"page": "0"},
        {"pageSize": "0"},
        {"pageSize": "1000"},
        {"minRating": "6"},
        {"minRating": "0"},
        {"minPrice": "-1"},
        {"sortBy": "color"},
        {"sortOrder": "up"},
        {"brandId": "1,x"},
        {"brandId": "1,99999999999999999999"},
        {"categoryId": "2147483648"},
        {"page": "2147483648"},
        {"page": "999999999999999999999"},
        {"categoryId": "abc"},
    ])
    def test_rejects_invalid_values(self, params):
        with pytest.raises(ValidationError):
            ProductListQuery.model_validate(params)


class TestFilterBuilder:

    def test_default_query_only_filters_active(self):
        conditions = ProductRepository.build_conditions(ProductListQuery())
        assert len(conditions) == 1

    def test_min_rating_is_not_pushed_to_the_store(self):
        conditions = ProductRepository.build_conditions(ProductListQuery(min_rating=4))
        assert len(conditions) == 1

    def test_each_filter_adds_one_predicate(self):
        query = ProductListQuery(
            category_id=1, brand_id=[1, 2], min_price=10, max_price=20,
            is_featured=True, is_new=True, is_bestseller=True, search="x",
        )
        assert len(ProductRepository.build_conditions(query)) == 9

    def test_price_bound_checks_both_price_columns(self):
        conditions = ProductRepository.build_conditions(ProductListQuery(min_price=10))
        sql = str(conditions[1].compile(compile_kwargs={"literal_binds": True}))

        assert "sale_price IS NOT NULL" in sql
        assert "sale_price IS NULL" in sql
        assert "products.original_price >=" in sql

    def test_search_escapes_like_wildcards(self):
        conditions = ProductRepository.build_conditions(ProductListQuery(search="50%_off"))
        sql = str(conditions[1].compile(compile_kwargs={"literal_binds": True}))

        assert "50/%/_off" in sql
        assert "ESCAPE '/'" in sql


class TestSortResolver:

    def render(self, sort_by, sort_order):
        return str(ProductRepository.resolve_ordering(sort_by, sort_order))

    def test_price_uses_effective_price(self):
        assert self.render("price", "asc") == "coalesce(products.sale_price, products.original_price) ASC"

    def test_fixed_direction_keys(self):
        assert self.render("popular", "asc") == "products.sold_quantity DESC"
        assert self.render("discount", "asc") == "products.discount_percent DESC"

    def test_name_follows_sort_order(self):
        assert self.render("name", "asc") == "products.product_name ASC"
        assert self.render("name", "desc") == "products.product_name DESC"

    @pytest.mark.parametrize("sort_by", ["newest", "unknown"])
    def test_newest_and_fallback(self, sort_by):
        assert self.render(sort_by, "asc") == "products.created_at DESC"

    def test_rating_uses_approved_average(self):
        sql = self.render("rating", "desc")

        assert "avg(product_reviews.rating)" in sql
        assert "is_approved" in sql
        assert sql.endswith("DESC")


class TestFormatting:

    def make_product(self, **overrides):
        fields = dict(
            id=10, name="Smartphone X", slug="smartphone-x", short_description=None,
            original_price=Decimal("1000000.00"), sale_price=Decimal("800000.00"),
            discount_percent=20, stock_quantity=3, sold_quantity=1,
            is_featured=False, is_new=True, is_bestseller=False,
            created_at=datetime(2026, 1, 1),
        )
        fields.update(overrides)
        return Product(**fields)

    def test_final_price(self):
        assert final_price(Decimal("1000000"), Decimal("800000")) == 800000
        assert final_price(Decimal("1000000"), None) == 1000000
        # A zero sale price is still a sale price
        assert final_price(Decimal("1000000"), Decimal("0")) == 0

    def test_round_rating(self):
        assert round_rating(None) == 0
        assert round_rating(Decimal("4.33333")) == 4.33
        assert round_rating(4.5) == 4.5

    @pytest.mark.parametrize("total_items, page, page_size, total_pages, has_next, has_prev", [
        (0, 1, 20, 0, False, False),
        (20, 1, 20, 1, False, False),
        (21, 1, 20, 2, True, False),
        (45, 3, 20, 3, False, True),
    ])
    def test_pagination(self, total_items, page, page_size, total_pages, has_next, has_prev):
        meta = build_pagination(page, page_size, total_items)

        assert meta.total_pages == total_pages
        assert meta.has_next_page is has_next
        assert meta.has_previous_page is has_prev

    def test_list_item_is_reproducible(self):
        product = self.make_product()
        category = Category(id=1, name="Phones", slug="phones")
        brand = Brand(id=2, name="Acme", slug="acme", logo_url=None)

        first = serialize_product_list_item(product, category, brand, Decimal("4.5000"), 2, "img1.png")
        second = serialize_product_list_item(product, category, brand, Decimal("4.5000"), 2, "img1.png")

        assert first == second
        assert first.final_price == 800000
        assert isinstance(first.original_price, float)
        assert first.average_rating == 4.5
        assert first.total_reviews == 2

    def test_list_item_camel_case_payload(self):
        item = serialize_product_list_item(self.make_product(sale_price=None), None, None, 0, 0, None)
        payload = item.model_dump(by_alias=True)

        assert payload["finalPrice"] == 1000000
        assert payload["salePrice"] is None
        assert payload["primaryImage"] is None
        assert payload["brand"] is None
        assert "isBestseller" in payload
