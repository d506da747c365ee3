import asyncio
import logging
import time
import uuid
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Callable, Dict, List, Optional

import pytz

from app.application.cart_store import CartStore
from app.core.config import settings
from app.core.exceptions import CheckoutStateError, PaymentGatewayError, QRCodeError
from app.domain.entities import (
    CartSnapshot,
    CheckoutPrefill,
    CODOrder,
    CustomerInfo,
    HostedCheckoutOptions,
    OrderLineItem,
    OrderRecord,
    OrderStatus,
    PaymentMethod,
    PaymentResult,
    QRPayment,
)
from app.domain.validation import normalize_phone, validate_customer_info
from app.infrastructure.upi_qr import QRCodeRenderer, build_upi_uri
from app.interfaces.IOrderRepository import IOrderRepository
from app.interfaces.IPaymentGateway import IPaymentGateway
from app.utils.formatting import format_amount, format_delivery_date

logger = logging.getLogger(__name__)


class CheckoutStep(str, Enum):
    CLOSED = "closed"
    COLLECTING_DETAILS = "collecting_details"
    SELECTING_METHOD = "selecting_method"
    PROCESSING = "processing"
    SUCCEEDED = "succeeded"
    AWAITING_QR_SCAN = "awaiting_qr_scan"
    COD_CONFIRMED = "cod_confirmed"
    FAILED = "failed"


class PaymentOption(str, Enum):
    PHONEPE = "phonepe"
    GOOGLEPAY = "googlepay"
    UPI_QR = "upi_qr"
    COD = "cod"


class FailureReason(str, Enum):
    GATEWAY_UNAVAILABLE = "gateway_unavailable"
    CANCELLED_BY_USER = "cancelled_by_user"
    VERIFICATION_FAILED = "verification_failed"
    QR_GENERATION_FAILED = "qr_generation_failed"
    ORDER_NOT_SAVED = "order_not_saved"


# --- CONFIG ---
# Instruments the hosted checkout surfaces for each wallet option
GATEWAY_INSTRUMENTS = {
    PaymentOption.PHONEPE: {"upi": True, "wallet": ["phonepe"]},
    PaymentOption.GOOGLEPAY: {"upi": True, "wallet": ["googlepay"]},
}

FAILURE_MESSAGES = {
    FailureReason.GATEWAY_UNAVAILABLE: "Payment initialization failed",
    FailureReason.CANCELLED_BY_USER: "Payment cancelled by user",
    FailureReason.VERIFICATION_FAILED: "Payment verification failed",
    FailureReason.QR_GENERATION_FAILED: "Failed to generate QR code",
    FailureReason.ORDER_NOT_SAVED: "Failed to save order",
}


def generate_order_id(prefix: str = "MRG") -> str:
    return f"{prefix}_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}"


def store_now() -> datetime:
    return datetime.now(pytz.timezone(settings.STORE_TIMEZONE))


class CheckoutWorkflow:
    """
    One shopper's checkout, from customer details to a terminal outcome.

    closed -> collecting_details -> selecting_method -> processing ->
    succeeded | awaiting_qr_scan | cod_confirmed | failed

    failed and awaiting_qr_scan both lead back to selecting_method. Every
    attempt gets a fresh order id. Success clears the cart once, after a
    display delay, through a timer this instance owns and can cancel.
    """

    def __init__(
        self,
        cart: CartStore,
        order_repo: IOrderRepository,
        gateway: IPaymentGateway,
        qr_renderer: QRCodeRenderer,
        notifier=None,
        *,
        clock: Callable[[], datetime] = store_now,
        success_delay: float = settings.SUCCESS_DISPLAY_DELAY,
        cod_delay: float = settings.COD_DISPLAY_DELAY,
        handling_fee: Decimal = settings.COD_HANDLING_FEE,
        delivery_days: int = settings.COD_DELIVERY_DAYS,
    ):
        self.cart = cart
        self.order_repo = order_repo
        self.gateway = gateway
        self.qr_renderer = qr_renderer
        self.notifier = notifier  # Injected NotificationService
        self.clock = clock
        self.success_delay = success_delay
        self.cod_delay = cod_delay
        self.handling_fee = handling_fee
        self.delivery_days = delivery_days
        self.currency = settings.CURRENCY
        self._reset()

    def _reset(self):
        self.step = CheckoutStep.CLOSED
        self.customer_info = CustomerInfo()
        self.errors: Dict[str, str] = {}
        self.current_order_id: Optional[str] = None
        self.result: Optional[PaymentResult] = None
        self.failure_reason: Optional[FailureReason] = None
        self.hosted_checkout: Optional[HostedCheckoutOptions] = None
        self.qr_payment: Optional[QRPayment] = None
        self.cod_order: Optional[CODOrder] = None
        self.attempt_task: Optional[asyncio.Task] = None
        self._suspended = asyncio.Event()
        self._completion_timer: Optional[asyncio.TimerHandle] = None
        self._completion_scheduled = False

    def _require(self, *steps: CheckoutStep):
        if self.step not in steps:
            allowed = ", ".join(s.value for s in steps)
            raise CheckoutStateError(f"Checkout is '{self.step.value}', expected one of: {allowed}")

    # --- TRANSITIONS ---

    def open(self) -> bool:
        """Start a checkout. Only a non-empty cart can be checked out."""
        self._require(CheckoutStep.CLOSED)
        if self.cart.is_empty:
            logger.info("[CHECKOUT] Not opening: cart is empty")
            return False
        self.step = CheckoutStep.COLLECTING_DETAILS
        return True

    def submit_details(self, name: str, email: str, phone: str, address: str) -> Dict[str, str]:
        self._require(CheckoutStep.COLLECTING_DETAILS)
        info = CustomerInfo(name=name.strip(), email=email.strip(), phone=phone.strip(), address=address.strip())

        self.errors = validate_customer_info(info)
        if self.errors:
            self.customer_info = info
            return self.errors

        self.customer_info = info.model_copy(update={"phone": normalize_phone(info.phone)})
        self.step = CheckoutStep.SELECTING_METHOD
        return {}

    def available_options(self) -> List[PaymentOption]:
        return list(PaymentOption)

    def retry(self):
        """Back to the payment options after a failed attempt. Details and cart are kept."""
        self._require(CheckoutStep.FAILED)
        self.result = None
        self.failure_reason = None
        self.step = CheckoutStep.SELECTING_METHOD

    def back_to_methods(self):
        self._require(CheckoutStep.AWAITING_QR_SCAN)
        self.qr_payment = None
        self.step = CheckoutStep.SELECTING_METHOD

    async def start_attempt(self, option: PaymentOption) -> asyncio.Task:
        """
        Run select_method as a task and return once it finished or is waiting
        on the hosted checkout, whichever comes first.
        """
        self._require(CheckoutStep.SELECTING_METHOD)
        self._suspended = asyncio.Event()
        attempt = asyncio.create_task(self.select_method(option))
        self.attempt_task = attempt

        waiter = asyncio.create_task(self._suspended.wait())
        await asyncio.wait({attempt, waiter}, return_when=asyncio.FIRST_COMPLETED)
        waiter.cancel()
        return attempt

    async def select_method(self, option: PaymentOption) -> PaymentResult:
        self._require(CheckoutStep.SELECTING_METHOD)
        option = PaymentOption(option)
        snapshot = self.cart.snapshot()
        if not snapshot.lines:
            raise CheckoutStateError("Cart is empty")

        self.step = CheckoutStep.PROCESSING
        self.result = None
        self.failure_reason = None
        self.current_order_id = generate_order_id()
        logger.info(
            f"[CHECKOUT] {self.current_order_id}: {option.value} for {format_amount(snapshot.total)}"
        )

        if option == PaymentOption.COD:
            return self._handle_cod(snapshot)
        if option == PaymentOption.UPI_QR:
            return self._handle_upi_qr(snapshot)
        return await self._handle_gateway(option, snapshot)

    def close(self):
        """
        The shopper closed the checkout. An in-flight attempt is abandoned (its
        pending record stays). A success that is still on display is finalized now.
        """
        if self.attempt_task and not self.attempt_task.done():
            self.attempt_task.cancel()
        if self._completion_timer is not None:
            self._completion_timer.cancel()
            self._finalize_success()
        self._reset()

    def teardown(self):
        """Session end: drop timers and attempts without running their effects."""
        if self.attempt_task and not self.attempt_task.done():
            self.attempt_task.cancel()
        if self._completion_timer is not None:
            self._completion_timer.cancel()
        self._reset()

    # --- HANDLERS ---

    async def _handle_gateway(self, option: PaymentOption, snapshot: CartSnapshot) -> PaymentResult:
        order_id = self.current_order_id

        try:
            gateway_order = await self.gateway.create_order(snapshot.total, self.currency, receipt=order_id)
        except PaymentGatewayError as e:
            return self._fail(FailureReason.GATEWAY_UNAVAILABLE, str(e))

        record = OrderRecord(
            order_id=order_id,
            amount=snapshot.total,
            currency=gateway_order.currency,
            customer_info=self.customer_info,
            line_items=_line_items(snapshot),
            payment_method=PaymentMethod.GATEWAY,
            status=OrderStatus.PENDING,
            created_at=self.clock(),
            gateway_order_id=gateway_order.id,
        )
        if not self.order_repo.save_order(record):
            return self._fail(FailureReason.ORDER_NOT_SAVED)

        self.hosted_checkout = HostedCheckoutOptions(
            key=settings.GATEWAY_KEY_ID,
            amount=gateway_order.amount,
            currency=gateway_order.currency,
            name=settings.MERCHANT_NAME,
            description=f"Payment for {len(snapshot.lines)} jewelry item(s)",
            order_id=gateway_order.id,
            prefill=CheckoutPrefill(
                name=self.customer_info.name,
                email=self.customer_info.email,
                contact=self.customer_info.phone,
            ),
            notes={"address": self.customer_info.address},
            theme={"color": settings.THEME_COLOR},
            method=GATEWAY_INSTRUMENTS[option],
        )

        # Suspend until the hosted UI calls back
        self._suspended.set()
        try:
            outcome = await self.gateway.open_hosted_checkout(self.hosted_checkout)
        except PaymentGatewayError as e:
            self.order_repo.update_status(order_id, OrderStatus.FAILED)
            return self._fail(FailureReason.GATEWAY_UNAVAILABLE, str(e))
        finally:
            self.hosted_checkout = None

        if outcome.dismissed:
            self.order_repo.update_status(order_id, OrderStatus.CANCELLED)
            return self._fail(FailureReason.CANCELLED_BY_USER)

        verified = outcome.gateway_order_id == gateway_order.id and self.gateway.verify_payment_signature(
            gateway_order.id, outcome.payment_id, outcome.signature
        )
        if not verified:
            self.order_repo.update_status(order_id, OrderStatus.FAILED)
            return self._fail(FailureReason.VERIFICATION_FAILED, "Invalid signature")

        self.order_repo.update_status(order_id, OrderStatus.COMPLETED, payment_id=outcome.payment_id)
        self.step = CheckoutStep.SUCCEEDED
        self.result = PaymentResult(
            success=True,
            message="Payment completed successfully",
            order_id=order_id,
            payment_id=outcome.payment_id,
            signature=outcome.signature,
        )
        logger.info(f"[CHECKOUT] {order_id}: payment {outcome.payment_id} verified")
        self._notify(self.order_repo.get_order(order_id))
        self._schedule_completion(self.success_delay)
        return self.result

    def _handle_upi_qr(self, snapshot: CartSnapshot) -> PaymentResult:
        order_id = self.current_order_id

        try:
            upi_uri = build_upi_uri(
                settings.UPI_PAYEE_VPA,
                settings.UPI_PAYEE_NAME,
                snapshot.total,
                self.currency,
                f"Payment for Order {order_id}",
            )
            qr_code_url = self.qr_renderer.render(upi_uri)
        except QRCodeError as e:
            return self._fail(FailureReason.QR_GENERATION_FAILED, str(e))

        record = OrderRecord(
            order_id=order_id,
            amount=snapshot.total,
            currency=self.currency,
            customer_info=self.customer_info,
            line_items=_line_items(snapshot),
            payment_method=PaymentMethod.GATEWAY,
            status=OrderStatus.PENDING,
            created_at=self.clock(),
        )
        if not self.order_repo.save_order(record):
            return self._fail(FailureReason.ORDER_NOT_SAVED)

        # Completion is confirmed outside the workflow (manual check / webhook)
        self.qr_payment = QRPayment(
            order_id=order_id,
            amount=snapshot.total,
            upi_uri=upi_uri,
            qr_code_url=qr_code_url,
        )
        self.step = CheckoutStep.AWAITING_QR_SCAN
        self.result = PaymentResult(success=True, message="Scan the QR code to pay", order_id=order_id)
        return self.result

    def _handle_cod(self, snapshot: CartSnapshot) -> PaymentResult:
        order = CODOrder.create(
            order_id=self.current_order_id,
            amount=snapshot.total,
            customer_info=self.customer_info,
            line_items=_line_items(snapshot),
            created_at=self.clock(),
            handling_fee=self.handling_fee,
            delivery_days=self.delivery_days,
            currency=self.currency,
        )
        if not self.order_repo.save_order(order):
            return self._fail(FailureReason.ORDER_NOT_SAVED)

        self.cod_order = order
        self.step = CheckoutStep.COD_CONFIRMED
        self.result = PaymentResult(
            success=True,
            message=f"Order confirmed. Pay {format_amount(order.total_amount)} on delivery.",
            order_id=order.order_id,
        )
        self._notify(order)
        self._schedule_completion(self.cod_delay)
        return self.result

    def _fail(self, reason: FailureReason, error: Optional[str] = None) -> PaymentResult:
        if reason == FailureReason.VERIFICATION_FAILED:
            logger.warning(f"[CHECKOUT] {self.current_order_id}: signature verification failed")
        else:
            logger.error(f"[CHECKOUT] {self.current_order_id}: {reason.value} ({error})")

        self.step = CheckoutStep.FAILED
        self.failure_reason = reason
        self.result = PaymentResult(
            success=False,
            message=FAILURE_MESSAGES[reason],
            order_id=self.current_order_id,
            error=error,
        )
        return self.result

    def _notify(self, order: Optional[OrderRecord]):
        if self.notifier and order:
            self.notifier.notify_admin_new_order(order)

    # --- SUCCESS SIDE EFFECT ---

    def _schedule_completion(self, delay: float):
        if self._completion_scheduled:
            return
        self._completion_scheduled = True
        self._completion_timer = asyncio.get_running_loop().call_later(delay, self._on_completion_timer)

    def _on_completion_timer(self):
        self._finalize_success()
        self._reset()

    def _finalize_success(self):
        self._completion_timer = None
        self.cart.clear()
        self.cart.close_drawer()
        logger.info(f"[CHECKOUT] {self.current_order_id}: cart cleared")

    # --- VIEW ---

    def state(self) -> dict:
        snapshot = self.cart.snapshot()
        cod = None
        if self.cod_order:
            cod = self.cod_order.model_dump(mode="json")
            cod["estimated_delivery"] = format_delivery_date(self.cod_order.estimated_delivery_date)
        return {
            "step": self.step.value,
            "amount": format_amount(snapshot.total),
            "customer_info": self.customer_info.model_dump(),
            "errors": self.errors,
            "options": [o.value for o in self.available_options()]
            if self.step == CheckoutStep.SELECTING_METHOD else [],
            "order_id": self.current_order_id,
            "failure_reason": self.failure_reason.value if self.failure_reason else None,
            "result": self.result.model_dump(mode="json") if self.result else None,
            "hosted_checkout": self.hosted_checkout.model_dump(mode="json") if self.hosted_checkout else None,
            "qr_payment": self.qr_payment.model_dump(mode="json") if self.qr_payment else None,
            "cod_order": cod,
        }


def _line_items(snapshot: CartSnapshot) -> List[OrderLineItem]:
    return [OrderLineItem.from_cart_line(line) for line in snapshot.lines]
