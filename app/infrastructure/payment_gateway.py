import asyncio
import logging
import time
import uuid
from decimal import Decimal
from typing import Dict, Optional

from app.core.exceptions import PaymentGatewayError
from app.domain.entities import GatewayOrder, HostedCheckoutOptions, HostedCheckoutOutcome
from app.infrastructure import signatures
from app.interfaces.IPaymentGateway import IPaymentGateway

logger = logging.getLogger(__name__)


def to_minor_units(amount: Decimal) -> int:
    """Rupees to paise, the unit gateway orders are created in."""
    return int((Decimal(amount) * 100).to_integral_value())


class SimulatedPaymentGateway(IPaymentGateway):
    """
    In-process stand-in for a hosted-checkout payment gateway.

    Orders are kept in memory. Opening the hosted checkout parks a future per
    gateway order; the shopper's browser (through the storefront API) or a test
    resolves it with submit_callback / complete_payment / dismiss.
    """

    def __init__(self, key_id: str, key_secret: str):
        self.key_id = key_id
        self.key_secret = key_secret
        self.orders: Dict[str, GatewayOrder] = {}
        self._pending: Dict[str, asyncio.Future] = {}
        self._fail_next: Optional[str] = None

    def fail_next_order(self, reason: str = "Gateway unavailable"):
        """Make the next create_order call fail, as when the SDK cannot be loaded."""
        self._fail_next = reason

    async def create_order(self, amount: Decimal, currency: str, receipt: str) -> GatewayOrder:
        if self._fail_next:
            reason, self._fail_next = self._fail_next, None
            raise PaymentGatewayError(reason)
        minor_units = to_minor_units(amount)
        if minor_units <= 0:
            raise PaymentGatewayError("Order amount must be at least one paisa")

        order = GatewayOrder(
            id=f"order_{uuid.uuid4().hex[:14]}",
            amount=minor_units,
            amount_due=minor_units,
            currency=currency,
            receipt=receipt,
            created_at=int(time.time()),
        )
        self.orders[order.id] = order
        logger.info(f"💳 Gateway order {order.id} created for receipt {receipt}")
        return order

    async def open_hosted_checkout(self, options: HostedCheckoutOptions) -> HostedCheckoutOutcome:
        if options.order_id not in self.orders:
            raise PaymentGatewayError(f"Unknown gateway order {options.order_id}")
        if options.order_id in self._pending:
            raise PaymentGatewayError(f"Checkout already open for {options.order_id}")

        future = asyncio.get_running_loop().create_future()
        self._pending[options.order_id] = future
        try:
            return await future
        finally:
            self._pending.pop(options.order_id, None)

    def is_open(self, gateway_order_id: str) -> bool:
        return gateway_order_id in self._pending

    def submit_callback(self, gateway_order_id: str, payment_id: str, signature: str) -> bool:
        """Forward the hosted UI's success callback. False if no checkout is waiting."""
        future = self._pending.get(gateway_order_id)
        if future is None or future.done():
            return False

        order = self.orders[gateway_order_id]
        self.orders[gateway_order_id] = order.model_copy(update={"attempts": order.attempts + 1})
        future.set_result(HostedCheckoutOutcome(
            payment_id=payment_id,
            gateway_order_id=gateway_order_id,
            signature=signature,
        ))
        return True

    def complete_payment(self, gateway_order_id: str) -> Optional[str]:
        """Simulate the shopper paying: sign the callback the way the gateway does."""
        payment_id = f"pay_{uuid.uuid4().hex[:14]}"
        signature = signatures.payment_signature(self.key_secret, gateway_order_id, payment_id)
        if not self.submit_callback(gateway_order_id, payment_id, signature):
            return None

        order = self.orders[gateway_order_id]
        self.orders[gateway_order_id] = order.model_copy(
            update={"status": "paid", "amount_paid": order.amount, "amount_due": 0}
        )
        return payment_id

    def dismiss(self, gateway_order_id: str) -> bool:
        future = self._pending.get(gateway_order_id)
        if future is None or future.done():
            return False
        future.set_result(HostedCheckoutOutcome(dismissed=True, gateway_order_id=gateway_order_id))
        return True

    def verify_payment_signature(self, gateway_order_id: str, payment_id: str, signature: str) -> bool:
        return signatures.verify_payment_signature(
            self.key_secret, gateway_order_id, payment_id, signature
        )
