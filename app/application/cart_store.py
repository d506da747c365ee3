from decimal import Decimal
from typing import Dict, Optional

from app.domain.entities import CartLine, CartSnapshot, Product


class CartStore:
    """One shopper's cart. Lines are unique by product id and keep insertion order."""

    def __init__(self):
        self._lines: Dict[int, CartLine] = {}
        self.drawer_open = False

    @property
    def is_empty(self) -> bool:
        return not self._lines

    def get_line(self, item_id: int) -> Optional[CartLine]:
        line = self._lines.get(item_id)
        return line.model_copy() if line else None

    def add_item(self, product: Product) -> CartSnapshot:
        line = self._lines.get(product.id)
        if line:
            line.quantity += 1
        else:
            self._lines[product.id] = CartLine.from_product(product)
        return self.snapshot()

    def remove_item(self, item_id: int) -> CartSnapshot:
        self._lines.pop(item_id, None)
        return self.snapshot()

    def update_quantity(self, item_id: int, new_quantity: int) -> CartSnapshot:
        if new_quantity <= 0:
            return self.remove_item(item_id)
        line = self._lines.get(item_id)
        if line:
            line.quantity = new_quantity
        return self.snapshot()

    def toggle_drawer(self) -> CartSnapshot:
        self.drawer_open = not self.drawer_open
        return self.snapshot()

    def close_drawer(self) -> CartSnapshot:
        self.drawer_open = False
        return self.snapshot()

    def clear(self) -> CartSnapshot:
        self._lines.clear()
        return self.snapshot()

    def snapshot(self) -> CartSnapshot:
        # Totals are recomputed on every read so they can never drift from the lines
        lines = [line.model_copy() for line in self._lines.values()]
        return CartSnapshot(
            lines=lines,
            total=sum((line.subtotal for line in lines), Decimal("0")),
            line_count=sum(line.quantity for line in lines),
            drawer_open=self.drawer_open,
        )
