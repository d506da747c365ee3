import json
import logging
from datetime import datetime
from decimal import Decimal
from typing import Callable, List, Optional, Tuple

from app.application.checkout_workflow import generate_order_id, store_now
from app.core.config import settings
from app.core.exceptions import OrderRequestError, StorefrontError, WebhookSignatureError
from app.domain.entities import (
    CODOrder,
    CustomerInfo,
    GatewayOrder,
    OrderLineItem,
    OrderRecord,
    OrderStatus,
    PaymentMethod,
)
from app.domain.validation import validate_customer_info
from app.infrastructure.payment_gateway import to_minor_units
from app.infrastructure.signatures import verify_webhook_signature
from app.interfaces.IOrderRepository import IOrderRepository
from app.interfaces.IPaymentGateway import IPaymentGateway

logger = logging.getLogger(__name__)

WEBHOOK_STATUS = {
    "payment.captured": OrderStatus.COMPLETED,
    "payment.failed": OrderStatus.FAILED,
    "order.paid": OrderStatus.COMPLETED,
}


class OrderService:
    """Server side of the payment flow: gateway orders, verification, webhooks, COD."""

    def __init__(
        self,
        order_repo: IOrderRepository,
        gateway: IPaymentGateway,
        notifier=None,
        *,
        webhook_secret: str = settings.GATEWAY_WEBHOOK_SECRET,
        clock: Callable[[], datetime] = store_now,
        handling_fee: Decimal = settings.COD_HANDLING_FEE,
        delivery_days: int = settings.COD_DELIVERY_DAYS,
    ):
        self.order_repo = order_repo
        self.gateway = gateway
        self.notifier = notifier
        self.webhook_secret = webhook_secret
        self.clock = clock
        self.handling_fee = handling_fee
        self.delivery_days = delivery_days

    async def create_order(
        self,
        amount: Optional[Decimal],
        currency: str,
        receipt: Optional[str],
        customer_info: Optional[CustomerInfo],
        items: Optional[List[OrderLineItem]],
    ) -> Tuple[GatewayOrder, OrderRecord]:
        if not amount or customer_info is None or not items:
            raise OrderRequestError("Missing required fields")
        if to_minor_units(amount) <= 0:
            raise OrderRequestError("Amount must be at least one paisa")

        order_id = receipt or generate_order_id()
        gateway_order = await self.gateway.create_order(amount, currency, receipt=order_id)

        record = OrderRecord(
            order_id=order_id,
            amount=amount,
            currency=currency,
            customer_info=customer_info,
            line_items=items,
            payment_method=PaymentMethod.GATEWAY,
            status=OrderStatus.PENDING,
            created_at=self.clock(),
            gateway_order_id=gateway_order.id,
        )
        if not self.order_repo.save_order(record):
            raise OrderRequestError(f"Order {order_id} already exists")
        return gateway_order, record

    def verify_payment(self, gateway_order_id: str, payment_id: str, signature: str) -> bool:
        if not self.gateway.verify_payment_signature(gateway_order_id, payment_id, signature):
            logger.warning(f"⚠️ Signature mismatch for gateway order {gateway_order_id}")
            return False

        order = self.order_repo.find_by_gateway_order_id(gateway_order_id)
        if order is None:
            logger.warning(f"⚠️ Verified payment {payment_id} for unknown gateway order {gateway_order_id}")
            return True

        self.order_repo.update_status(order.order_id, OrderStatus.COMPLETED, payment_id=payment_id)
        if self.notifier:
            self.notifier.notify_admin_new_order(self.order_repo.get_order(order.order_id))
        return True

    def handle_webhook(self, raw_body: bytes, signature: Optional[str]) -> Optional[str]:
        """Apply a signed gateway event to its order. Returns the event name."""
        if not verify_webhook_signature(self.webhook_secret, raw_body, signature):
            raise WebhookSignatureError("Invalid signature")

        try:
            payload = json.loads(raw_body)
        except json.JSONDecodeError as e:
            raise OrderRequestError(f"Malformed webhook payload: {e}")
        if not isinstance(payload, dict):
            raise OrderRequestError("Malformed webhook payload")

        event = payload.get("event")
        entity = payload
        for field in ("payload", "payment", "entity"):
            entity = entity.get(field) or {}
            if not isinstance(entity, dict):
                raise OrderRequestError("Malformed webhook payload")

        status = WEBHOOK_STATUS.get(event)
        if status is None:
            logger.info(f"Unhandled webhook event: {event}")
            return event

        gateway_order_id = entity.get("order_id")
        order = self.order_repo.find_by_gateway_order_id(gateway_order_id) if gateway_order_id else None
        if order is None:
            logger.warning(f"⚠️ Webhook {event} for unknown gateway order {gateway_order_id}")
            return event

        self.order_repo.update_status(order.order_id, status, payment_id=entity.get("id"))
        logger.info(f"🔔 Webhook {event}: order {order.order_id} -> {status.value}")
        return event

    def get_order(self, order_id: str) -> Optional[OrderRecord]:
        return self.order_repo.get_order(order_id)

    def create_cod_order(
        self,
        amount: Optional[Decimal],
        customer_info: Optional[CustomerInfo],
        items: Optional[List[OrderLineItem]],
    ) -> CODOrder:
        if not amount or customer_info is None or not items:
            raise OrderRequestError("Missing required fields")
        if to_minor_units(amount) <= 0:
            raise OrderRequestError("Amount must be at least one paisa")

        errors = validate_customer_info(customer_info)
        if errors:
            raise OrderRequestError(f"Invalid customer details: {', '.join(sorted(errors))}")

        order = CODOrder.create(
            order_id=generate_order_id("COD"),
            amount=amount,
            customer_info=customer_info,
            line_items=items,
            created_at=self.clock(),
            handling_fee=self.handling_fee,
            delivery_days=self.delivery_days,
            currency=settings.CURRENCY,
        )
        if not self.order_repo.save_order(order):
            raise StorefrontError("Failed to save order")

        if self.notifier:
            self.notifier.notify_admin_new_order(order)
        return order
