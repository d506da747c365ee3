from enum import Enum
from typing import Iterable, List, Optional

from app.domain.entities import Category, Product


class ProductFilter(str, Enum):
    ALL = "all"
    IN_STOCK = "inStock"
    FEATURED = "featured"


class ProductSort(str, Enum):
    NAME = "name"
    PRICE = "price"
    RATING = "rating"


class CatalogQueryService:
    """Read-only queries over a static product list. Results keep catalog order."""

    def __init__(self, products: Iterable[Product], categories: Iterable[Category]):
        self.products = list(products)
        self.categories = list(categories)

    def get_products_by_category(self, category_id: str, subcategory_id: Optional[str] = None) -> List[Product]:
        return [
            p for p in self.products
            if p.category == category_id and (subcategory_id is None or p.subcategory == subcategory_id)
        ]

    def get_product_by_id(self, product_id: int) -> Optional[Product]:
        return next((p for p in self.products if p.id == product_id), None)

    def get_featured_products(self) -> List[Product]:
        return [p for p in self.products if p.featured]

    def get_category(self, category_id: str) -> Optional[Category]:
        return next((c for c in self.categories if c.id == category_id), None)

    def list_categories(self) -> List[Category]:
        return list(self.categories)


# Applied by callers after retrieval
def filter_products(products: Iterable[Product], by: ProductFilter = ProductFilter.ALL) -> List[Product]:
    if by == ProductFilter.IN_STOCK:
        return [p for p in products if p.in_stock]
    if by == ProductFilter.FEATURED:
        return [p for p in products if p.featured]
    return list(products)


def sort_products(products: Iterable[Product], by: ProductSort = ProductSort.NAME) -> List[Product]:
    if by == ProductSort.PRICE:
        return sorted(products, key=lambda p: p.price)
    if by == ProductSort.RATING:
        return sorted(products, key=lambda p: p.rating, reverse=True)
    return sorted(products, key=lambda p: p.name.casefold())
