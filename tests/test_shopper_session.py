import asyncio

import pytest

from app.application.checkout_workflow import CheckoutStep, PaymentOption
from app.application.shopper_session import SessionRegistry
from conftest import FIXED_NOW


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


@pytest.fixture
def idle_clock():
    return FakeClock()


@pytest.fixture
def registry(store, sql_repo, gateway, qr_renderer, idle_clock):
    registry = SessionRegistry(
        store,
        sql_repo,
        gateway,
        qr_renderer,
        favorites_key="favorites",
        ttl=60,
        idle_clock=idle_clock,
        clock=lambda: FIXED_NOW,
        cod_delay=0.05,
    )
    yield registry
    registry.end_all()


class TestSessionRegistry:
    def test_same_id_returns_the_same_session(self, registry):
        assert registry.get("a") is registry.get("a")
        assert registry.get("a") is not registry.get("b")
        assert len(registry) == 2

    def test_idle_sessions_are_ended(self, registry, idle_clock):
        registry.get("old")
        idle_clock.now = 61

        registry.get("new")

        assert len(registry) == 1
        assert not registry.end("old")

    def test_access_keeps_a_session_alive(self, registry, idle_clock):
        registry.get("a")
        idle_clock.now = 50
        registry.get("a")
        idle_clock.now = 100

        registry.get("b")

        assert len(registry) == 2

    async def test_expiry_cancels_the_pending_success_timer(self, registry, idle_clock, thushi, customer):
        session = registry.get("idle")
        session.cart.add_item(thushi)
        session.checkout.open()
        session.checkout.submit_details(customer.name, customer.email, customer.phone, customer.address)
        await session.checkout.select_method(PaymentOption.COD)

        idle_clock.now = 61
        registry.get("other")
        await asyncio.sleep(0.15)

        assert len(registry) == 1
        assert session.checkout.step == CheckoutStep.CLOSED
        assert not session.cart.is_empty
