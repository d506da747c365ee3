from datetime import date, timedelta
from decimal import Decimal

import pytest

from app.domain.entities import CODOrder, OrderLineItem, OrderRecord, OrderStatus, PaymentMethod
from conftest import FIXED_NOW


@pytest.fixture(params=["sql_repo", "local_repo"])
def repo(request):
    return request.getfixturevalue(request.param)


def make_record(customer, order_id="MRG_1", minutes=0, **overrides):
    fields = dict(
        order_id=order_id,
        amount=Decimal("45999"),
        customer_info=customer,
        line_items=[OrderLineItem(id=1, name="Royal Thushi Set", unit_price=Decimal("45999"), quantity=1)],
        payment_method=PaymentMethod.GATEWAY,
        created_at=FIXED_NOW + timedelta(minutes=minutes),
    )
    fields.update(overrides)
    return OrderRecord(**fields)


class TestSaveAndGet:
    def test_round_trip(self, repo, customer):
        assert repo.save_order(make_record(customer, gateway_order_id="order_abc"))

        stored = repo.get_order("MRG_1")
        assert stored.status == OrderStatus.PENDING
        assert stored.amount == Decimal("45999")
        assert stored.customer_info == customer
        assert stored.line_items[0].name == "Royal Thushi Set"
        assert stored.gateway_order_id == "order_abc"

    def test_order_ids_are_never_reused(self, repo, customer):
        assert repo.save_order(make_record(customer))
        assert not repo.save_order(make_record(customer, amount=Decimal("1")))

        assert repo.get_order("MRG_1").amount == Decimal("45999")

    def test_missing_order(self, repo):
        assert repo.get_order("MRG_missing") is None

    def test_cod_orders_keep_their_fee_and_delivery_date(self, repo, customer):
        order = CODOrder.create(
            order_id="MRG_COD",
            amount=Decimal("45999"),
            customer_info=customer,
            line_items=[OrderLineItem(id=1, name="Royal Thushi Set", unit_price=Decimal("45999"), quantity=1)],
            created_at=FIXED_NOW,
            handling_fee=Decimal("50"),
            delivery_days=7,
        )
        assert repo.save_order(order)

        stored = repo.get_order("MRG_COD")
        assert isinstance(stored, CODOrder)
        assert stored.status == OrderStatus.PROCESSING
        assert stored.payment_method == PaymentMethod.COD
        assert stored.total_amount == Decimal("46049")
        assert stored.estimated_delivery_date == date(2026, 10, 26)


class TestUpdates:
    def test_update_status_records_the_payment(self, repo, customer):
        repo.save_order(make_record(customer))

        assert repo.update_status("MRG_1", OrderStatus.COMPLETED, payment_id="pay_123")

        stored = repo.get_order("MRG_1")
        assert stored.status == OrderStatus.COMPLETED
        assert stored.payment_id == "pay_123"
        assert stored.is_terminal

    def test_update_missing_order(self, repo):
        assert not repo.update_status("MRG_missing", OrderStatus.FAILED)

    def test_find_by_gateway_order_id(self, repo, customer):
        repo.save_order(make_record(customer, "MRG_1", gateway_order_id="order_a"))
        repo.save_order(make_record(customer, "MRG_2", gateway_order_id="order_b"))

        assert repo.find_by_gateway_order_id("order_b").order_id == "MRG_2"
        assert repo.find_by_gateway_order_id("order_z") is None

    def test_latest_orders_first(self, repo, customer):
        for i in range(3):
            repo.save_order(make_record(customer, f"MRG_{i}", minutes=i))

        assert [o.order_id for o in repo.get_all_orders(limit=2)] == ["MRG_2", "MRG_1"]


class TestLocalRepository:
    def test_records_live_under_order_keys(self, local_repo, store, customer):
        local_repo.save_order(make_record(customer))

        assert store.keys("order_") == ["order_MRG_1"]

    def test_corrupt_record_reads_as_missing(self, local_repo, store):
        store.set("order_MRG_bad", "{oops")

        assert local_repo.get_order("MRG_bad") is None
        assert local_repo.get_all_orders() == []
