from decimal import Decimal

from app.application.cart_store import CartStore


class TestAddItem:
    def test_new_product_gets_a_line_with_quantity_one(self, cart, thushi):
        snapshot = cart.add_item(thushi)

        assert len(snapshot.lines) == 1
        assert snapshot.lines[0].id == 1
        assert snapshot.lines[0].quantity == 1
        assert snapshot.total == Decimal("45999")

    def test_same_product_increments_quantity(self, cart, thushi):
        cart.add_item(thushi)
        snapshot = cart.add_item(thushi)

        assert len(snapshot.lines) == 1
        assert snapshot.lines[0].quantity == 2
        assert snapshot.line_count == 2
        assert snapshot.total == Decimal("91998")

    def test_lines_keep_insertion_order(self, cart, thushi, bangles):
        cart.add_item(bangles)
        snapshot = cart.add_item(thushi)

        assert [line.id for line in snapshot.lines] == [3, 1]


class TestQuantities:
    def test_update_quantity_sets_the_new_value(self, cart, thushi):
        cart.add_item(thushi)
        snapshot = cart.update_quantity(1, 4)

        assert snapshot.lines[0].quantity == 4
        assert snapshot.total == Decimal("183996")

    def test_zero_or_negative_quantity_removes_the_line(self, cart, thushi, bangles):
        cart.add_item(thushi)
        cart.add_item(bangles)

        assert [l.id for l in cart.update_quantity(1, 0).lines] == [3]
        assert cart.update_quantity(3, -2).lines == []

    def test_unknown_ids_are_ignored(self, cart, thushi):
        cart.add_item(thushi)

        assert cart.update_quantity(99, 3).line_count == 1
        assert cart.remove_item(99).line_count == 1


class TestTotals:
    def test_totals_follow_every_mutation(self, cart, thushi, bangles):
        cart.add_item(thushi)
        cart.add_item(bangles)
        cart.update_quantity(3, 2)
        snapshot = cart.snapshot()

        assert snapshot.total == sum(l.unit_price * l.quantity for l in snapshot.lines)
        assert snapshot.line_count == 3

        snapshot = cart.remove_item(1)
        assert snapshot.total == Decimal("65998")
        assert snapshot.line_count == 2

    def test_empty_cart(self):
        snapshot = CartStore().snapshot()

        assert snapshot.lines == []
        assert snapshot.total == Decimal("0")
        assert snapshot.line_count == 0

    def test_snapshot_is_a_copy(self, cart, thushi):
        snapshot = cart.add_item(thushi)
        snapshot.lines[0].quantity = 10

        assert cart.get_line(1).quantity == 1

    def test_get_line_is_a_copy(self, cart, thushi):
        cart.add_item(thushi)
        cart.get_line(1).quantity = 0

        assert cart.get_line(1).quantity == 1
        assert cart.snapshot().line_count == 1
        assert cart.get_line(99) is None


class TestDrawerAndClear:
    def test_toggle_and_close(self, cart):
        assert cart.toggle_drawer().drawer_open is True
        assert cart.toggle_drawer().drawer_open is False
        cart.toggle_drawer()
        assert cart.close_drawer().drawer_open is False

    def test_clear_empties_lines_but_keeps_drawer(self, cart, thushi):
        cart.add_item(thushi)
        cart.toggle_drawer()
        snapshot = cart.clear()

        assert cart.is_empty
        assert snapshot.total == Decimal("0")
        assert snapshot.drawer_open is True
