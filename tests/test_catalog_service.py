import pytest

from app.application.catalog_service import ProductFilter, ProductSort, filter_products, sort_products


class TestQueries:
    def test_products_by_category_keep_catalog_order(self, catalog):
        products = catalog.get_products_by_category("all-jewellery")

        assert [p.id for p in products] == [1, 2, 3]

    def test_subcategory_narrows_the_result(self, catalog):
        products = catalog.get_products_by_category("all-jewellery", "bracelets")

        assert [p.id for p in products] == [3]

    def test_unknown_category_is_empty(self, catalog):
        assert catalog.get_products_by_category("watches") == []

    def test_product_by_id(self, catalog):
        assert catalog.get_product_by_id(5).name == "Diamond Mangalsutra"
        assert catalog.get_product_by_id(999) is None

    def test_featured_products(self, catalog):
        assert [p.id for p in catalog.get_featured_products()] == [1, 2, 4, 5]

    def test_categories(self, catalog):
        assert catalog.get_category("oxide").name == "Oxide"
        assert catalog.get_category("missing") is None
        assert len(catalog.list_categories()) == 5


class TestFilterAndSort:
    def test_filter_in_stock_drops_sold_out_items(self, catalog):
        in_stock = filter_products(catalog.products, ProductFilter.IN_STOCK)

        assert 6 not in [p.id for p in in_stock]
        assert len(in_stock) == 5

    def test_filter_featured(self, catalog):
        assert all(p.featured for p in filter_products(catalog.products, ProductFilter.FEATURED))

    def test_filter_all_is_a_copy(self, catalog):
        result = filter_products(catalog.products)

        assert result == catalog.products
        assert result is not catalog.products

    @pytest.mark.parametrize(
        "by, expected",
        [
            (ProductSort.PRICE, [3, 1, 2]),
            (ProductSort.RATING, [2, 1, 3]),
            (ProductSort.NAME, [3, 2, 1]),
        ],
    )
    def test_sort(self, catalog, by, expected):
        products = catalog.get_products_by_category("all-jewellery")

        assert [p.id for p in sort_products(products, by)] == expected

    def test_name_sort_ignores_case(self, catalog):
        products = [p.model_copy(update={"name": n}) for p, n in zip(catalog.products[:3], ["beta", "Alpha", "gamma"])]

        assert [p.name for p in sort_products(products, ProductSort.NAME)] == ["Alpha", "beta", "gamma"]

    def test_rating_ties_keep_catalog_order(self, catalog):
        top = sort_products(catalog.products, ProductSort.RATING)

        # products 2 and 5 share the top rating
        assert [p.id for p in top[:2]] == [2, 5]
