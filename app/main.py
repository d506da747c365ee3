import logging
import time
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.requests import Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.exc import OperationalError

from app.core.config import settings

# 1. Infrastructure & Domain Imports
from app.application.catalog_service import CatalogQueryService
from app.application.order_service import OrderService
from app.application.shopper_session import SessionRegistry
from app.domain import models  # noqa: F401  registers the orders table
from app.domain.catalog_data import CATEGORIES, PRODUCTS
from app.infrastructure.database import Base, engine
from app.infrastructure.local_store import LocalStore
from app.infrastructure.notification_service import NotificationService
from app.infrastructure.payment_gateway import SimulatedPaymentGateway
from app.infrastructure.repositories.local_order_repository import LocalOrderRepository
from app.infrastructure.repositories.order_repository import SqlOrderRepository
from app.infrastructure.upi_qr import QRCodeRenderer
from app.interfaces import payment_api, storefront_api
from app.interfaces.IOrderRepository import IOrderRepository

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))

MAX_RETRIES = 10
WAIT_SECONDS = 3


# ---------------------------------------------------------
# DATABASE CONNECTION (With Retry Logic)
# ---------------------------------------------------------
def init_database(bind=engine, max_retries: int = MAX_RETRIES, wait_seconds: float = WAIT_SECONDS) -> bool:
    for attempt in range(max_retries):
        try:
            print(f"🔄 Attempting DB connection ({attempt + 1}/{max_retries})...")
            Base.metadata.create_all(bind=bind)
            print("✅ DB Connected and Tables Created.")
            return True
        except OperationalError:
            print(f"⚠️ DB not ready yet. Waiting {wait_seconds}s...")
            time.sleep(wait_seconds)

    print("❌ Could not connect to DB after retries.")
    return False


def build_order_repository(store: LocalStore) -> IOrderRepository:
    if settings.ORDER_STORE == "local":
        logger.info("Orders are kept in the local store")
        return LocalOrderRepository(store)
    init_database()
    return SqlOrderRepository()


# ---------------------------------------------------------
# COMPOSITION ROOT
# ---------------------------------------------------------
def create_app(
    store: LocalStore | None = None,
    order_repo: IOrderRepository | None = None,
    gateway: SimulatedPaymentGateway | None = None,
    notifier: NotificationService | None = None,
    **workflow_options,
) -> FastAPI:
    """Wire the storefront. Every collaborator can be injected (tests pass in-memory ones)."""
    store = store or LocalStore(settings.REDIS_URL)
    order_repo = order_repo or build_order_repository(store)
    gateway = gateway or SimulatedPaymentGateway(settings.GATEWAY_KEY_ID, settings.GATEWAY_KEY_SECRET)
    notifier = notifier or NotificationService()
    qr_renderer = QRCodeRenderer(settings.QR_SERVICE_URL)

    sessions = SessionRegistry(
        store,
        order_repo,
        gateway,
        qr_renderer,
        notifier,
        favorites_key=settings.FAVORITES_KEY,
        ttl=settings.SESSION_TTL,
        **workflow_options,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        # Pending success timers and hosted checkouts die with their sessions
        sessions.end_all()

    app = FastAPI(title=settings.PROJECT_NAME, lifespan=lifespan)
    app.state.store = store
    app.state.order_repo = order_repo
    app.state.gateway = gateway
    app.state.catalog = CatalogQueryService(PRODUCTS, CATEGORIES)
    app.state.sessions = sessions
    app.state.order_service = OrderService(order_repo, gateway, notifier)

    # Include Routers
    app.include_router(storefront_api.router)
    app.include_router(payment_api.router)
    storefront_api.install_error_handlers(app)

    @app.get("/")
    def health_check():
        return {
            "status": "active",
            "system": settings.PROJECT_NAME,
            "store": "redis" if app.state.store.redis_available else "ram",
            "sessions": len(app.state.sessions),
        }

    @app.get("/admin/orders", response_class=HTMLResponse)
    def read_orders(request: Request):
        orders = app.state.order_repo.get_all_orders(limit=20)
        return templates.TemplateResponse(request, "dashboard.html", {"orders": orders})

    return app


app = create_app()
