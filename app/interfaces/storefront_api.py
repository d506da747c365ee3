from typing import Optional
from fastapi import APIRouter, Depends, FastAPI, Header, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel
import logging

from app.application.catalog_service import ProductFilter, ProductSort, filter_products, sort_products
from app.application.checkout_workflow import CheckoutStep, PaymentOption
from app.application.shopper_session import ShopperSession
from app.core.exceptions import CheckoutStateError

router = APIRouter(prefix="/api")
logger = logging.getLogger(__name__)


class ProductRef(BaseModel):
    product_id: int


class QuantityBody(BaseModel):
    quantity: int


class DetailsBody(BaseModel):
    name: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""


class PayBody(BaseModel):
    option: PaymentOption


class GatewayCallbackBody(BaseModel):
    dismissed: bool = False
    payment_id: Optional[str] = None
    signature: Optional[str] = None


async def get_session(request: Request, x_session_id: str = Header(...)) -> ShopperSession:
    """Shopper sessions are keyed by the X-Session-Id header."""
    return request.app.state.sessions.get(x_session_id)


def install_error_handlers(app: FastAPI):
    @app.exception_handler(CheckoutStateError)
    async def checkout_state_error(request: Request, exc: CheckoutStateError):
        return JSONResponse(status_code=409, content={"success": False, "message": str(exc)})


def not_found(message: str) -> JSONResponse:
    return JSONResponse(status_code=404, content={"success": False, "message": message})


# --- CATALOG ---

@router.get("/categories")
async def list_categories(request: Request):
    return [c.model_dump(mode="json") for c in request.app.state.catalog.list_categories()]


@router.get("/products")
async def list_products(
    request: Request,
    category: Optional[str] = None,
    subcategory: Optional[str] = None,
    filter: ProductFilter = ProductFilter.ALL,
    sort: ProductSort = ProductSort.NAME,
):
    catalog = request.app.state.catalog
    if category:
        products = catalog.get_products_by_category(category, subcategory)
    else:
        products = catalog.products
    products = sort_products(filter_products(products, filter), sort)
    return [p.model_dump(mode="json") for p in products]


@router.get("/products/{product_id}")
async def get_product(product_id: int, request: Request):
    product = request.app.state.catalog.get_product_by_id(product_id)
    if product is None:
        return not_found("Product not found")
    return product.model_dump(mode="json")


# --- CART ---

@router.get("/cart")
async def get_cart(session: ShopperSession = Depends(get_session)):
    return session.cart.snapshot().model_dump(mode="json")


@router.post("/cart/items")
async def add_to_cart(body: ProductRef, request: Request, session: ShopperSession = Depends(get_session)):
    product = request.app.state.catalog.get_product_by_id(body.product_id)
    if product is None:
        return not_found("Product not found")
    return session.cart.add_item(product).model_dump(mode="json")


@router.patch("/cart/items/{product_id}")
async def update_cart_item(product_id: int, body: QuantityBody, session: ShopperSession = Depends(get_session)):
    return session.cart.update_quantity(product_id, body.quantity).model_dump(mode="json")


@router.delete("/cart/items/{product_id}")
async def remove_cart_item(product_id: int, session: ShopperSession = Depends(get_session)):
    return session.cart.remove_item(product_id).model_dump(mode="json")


@router.delete("/cart")
async def clear_cart(session: ShopperSession = Depends(get_session)):
    return session.cart.clear().model_dump(mode="json")


@router.post("/cart/toggle")
async def toggle_cart(session: ShopperSession = Depends(get_session)):
    return session.cart.toggle_drawer().model_dump(mode="json")


# --- FAVORITES ---

@router.get("/favorites")
async def get_favorites(session: ShopperSession = Depends(get_session)):
    return session.favorites.snapshot().model_dump(mode="json")


@router.post("/favorites")
async def add_favorite(body: ProductRef, request: Request, session: ShopperSession = Depends(get_session)):
    product = request.app.state.catalog.get_product_by_id(body.product_id)
    if product is None:
        return not_found("Product not found")
    return session.favorites.add_favorite(product).model_dump(mode="json")


@router.delete("/favorites/{product_id}")
async def remove_favorite(product_id: int, session: ShopperSession = Depends(get_session)):
    return session.favorites.remove_favorite(product_id).model_dump(mode="json")


@router.post("/favorites/toggle")
async def toggle_favorites(session: ShopperSession = Depends(get_session)):
    return session.favorites.toggle_drawer().model_dump(mode="json")


# --- CHECKOUT ---

@router.get("/checkout")
async def checkout_state(session: ShopperSession = Depends(get_session)):
    return session.checkout.state()


@router.post("/checkout/open")
async def open_checkout(session: ShopperSession = Depends(get_session)):
    if not session.checkout.open():
        return JSONResponse(status_code=400, content={"success": False, "message": "Cart is empty"})
    return session.checkout.state()


@router.post("/checkout/details")
async def submit_details(body: DetailsBody, session: ShopperSession = Depends(get_session)):
    errors = session.checkout.submit_details(body.name, body.email, body.phone, body.address)
    if errors:
        return JSONResponse(status_code=422, content=session.checkout.state())
    return session.checkout.state()


@router.post("/checkout/pay")
async def pay(body: PayBody, session: ShopperSession = Depends(get_session)):
    """
    Start a payment attempt. Gateway wallets return while the hosted checkout
    is open (step 'processing'); the shopper finishes it via gateway-callback.
    """
    attempt = await session.checkout.start_attempt(body.option)
    if attempt.done():
        attempt.result()  # surfaces CheckoutStateError
    return session.checkout.state()


@router.post("/checkout/gateway-callback")
async def gateway_callback(body: GatewayCallbackBody, request: Request, session: ShopperSession = Depends(get_session)):
    checkout = session.checkout
    hosted = checkout.hosted_checkout
    if checkout.step != CheckoutStep.PROCESSING or hosted is None:
        raise CheckoutStateError("No hosted checkout is waiting for a callback")

    gateway = request.app.state.gateway
    if body.dismissed:
        gateway.dismiss(hosted.order_id)
    else:
        gateway.submit_callback(hosted.order_id, body.payment_id or "", body.signature or "")

    if checkout.attempt_task is not None:
        await checkout.attempt_task
    return checkout.state()


@router.post("/checkout/retry")
async def retry_checkout(session: ShopperSession = Depends(get_session)):
    session.checkout.retry()
    return session.checkout.state()


@router.post("/checkout/back")
async def back_to_methods(session: ShopperSession = Depends(get_session)):
    session.checkout.back_to_methods()
    return session.checkout.state()


@router.post("/checkout/close")
async def close_checkout(session: ShopperSession = Depends(get_session)):
    session.checkout.close()
    return {
        "checkout": session.checkout.state(),
        "cart": session.cart.snapshot().model_dump(mode="json"),
    }


@router.delete("/session")
async def end_session(request: Request, x_session_id: str = Header(...)):
    ended = request.app.state.sessions.end(x_session_id)
    logger.info(f"Session {x_session_id} end requested (active={ended})")
    return {"success": ended}
