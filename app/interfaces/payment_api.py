from decimal import Decimal
from typing import List, Optional
from fastapi import APIRouter, Header, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel
import logging

from app.core.exceptions import OrderRequestError, PaymentGatewayError, StorefrontError, WebhookSignatureError
from app.domain.entities import CustomerInfo, OrderLineItem
from app.utils.formatting import format_delivery_date

router = APIRouter(prefix="/api")
logger = logging.getLogger(__name__)


class CreateOrderBody(BaseModel):
    amount: Optional[Decimal] = None
    currency: str = "INR"
    receipt: Optional[str] = None
    customer_info: Optional[CustomerInfo] = None
    items: Optional[List[OrderLineItem]] = None


class VerifyPaymentBody(BaseModel):
    gateway_order_id: str
    payment_id: str
    signature: str


class CODOrderBody(BaseModel):
    amount: Optional[Decimal] = None
    customer_info: Optional[CustomerInfo] = None
    items: Optional[List[OrderLineItem]] = None


def failure(status_code: int, message: str, error: Optional[str] = None) -> JSONResponse:
    content = {"success": False, "message": message}
    if error:
        content["error"] = error
    return JSONResponse(status_code=status_code, content=content)


@router.post("/create-order")
async def create_order(body: CreateOrderBody, request: Request):
    """Create a gateway order and a pending order record."""
    service = request.app.state.order_service
    try:
        gateway_order, record = await service.create_order(
            body.amount, body.currency, body.receipt, body.customer_info, body.items
        )
    except OrderRequestError as e:
        return failure(400, str(e))
    except PaymentGatewayError as e:
        logger.error(f"❌ Order creation error: {e}")
        return failure(500, "Failed to create order", str(e))

    return {
        "success": True,
        "order": gateway_order.model_dump(mode="json"),
        "order_data": record.model_dump(mode="json"),
    }


@router.post("/verify-payment")
def verify_payment(body: VerifyPaymentBody, request: Request):
    service = request.app.state.order_service
    if not service.verify_payment(body.gateway_order_id, body.payment_id, body.signature):
        return failure(400, "Payment verification failed")
    return {
        "success": True,
        "message": "Payment verified successfully",
        "payment_id": body.payment_id,
    }


@router.post("/webhook")
async def gateway_webhook(request: Request, x_gateway_signature: Optional[str] = Header(None)):
    """
    Gateway webhook endpoint.
    The signature covers the raw body, so it is read before any JSON parsing.
    """
    raw_body = await request.body()
    service = request.app.state.order_service
    try:
        event = service.handle_webhook(raw_body, x_gateway_signature)
    except WebhookSignatureError:
        logger.warning("⚠️ Webhook rejected: invalid signature")
        return JSONResponse(status_code=400, content={"message": "Invalid signature"})
    except OrderRequestError as e:
        return JSONResponse(status_code=400, content={"message": str(e)})

    logger.info(f"📨 Webhook processed: {event}")
    return {"status": "ok"}


@router.get("/order/{order_id}")
def get_order(order_id: str, request: Request):
    order = request.app.state.order_service.get_order(order_id)
    if order is None:
        return failure(404, "Order not found")
    return {"success": True, "order": order.model_dump(mode="json")}


@router.post("/cod-order")
def create_cod_order(body: CODOrderBody, request: Request):
    service = request.app.state.order_service
    try:
        order = service.create_cod_order(body.amount, body.customer_info, body.items)
    except OrderRequestError as e:
        return failure(400, str(e))
    except StorefrontError as e:
        logger.error(f"❌ COD order error: {e}")
        return failure(500, "Failed to process COD order", str(e))

    return {
        "success": True,
        "order": {
            "order_id": order.order_id,
            "amount": str(order.amount),
            "handling_fee": str(order.handling_fee),
            "total_amount": str(order.total_amount),
            "customer_info": order.customer_info.model_dump(),
            "status": "confirmed",
            "estimated_delivery": format_delivery_date(order.estimated_delivery_date),
        },
    }
