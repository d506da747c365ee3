import os

# Keep the module-level app (app.main) off the on-disk database
os.environ.setdefault("DATABASE_URL", "sqlite://")

from datetime import datetime

import pytest
import pytz
from sqlalchemy.orm import sessionmaker

from app.application.cart_store import CartStore
from app.application.catalog_service import CatalogQueryService
from app.application.checkout_workflow import CheckoutWorkflow
from app.core.config import settings
from app.domain import models  # noqa: F401
from app.domain.catalog_data import CATEGORIES, PRODUCTS
from app.domain.entities import CustomerInfo
from app.infrastructure.database import Base, make_engine
from app.infrastructure.local_store import LocalStore
from app.infrastructure.payment_gateway import SimulatedPaymentGateway
from app.infrastructure.repositories.local_order_repository import LocalOrderRepository
from app.infrastructure.repositories.order_repository import SqlOrderRepository
from app.infrastructure.upi_qr import QRCodeRenderer

FIXED_NOW = pytz.timezone("Asia/Kolkata").localize(datetime(2026, 10, 19, 12, 0))


class RecordingNotifier:
    """Stands in for NotificationService; remembers what would have been sent."""

    def __init__(self):
        self.sent = []

    def notify_admin_new_order(self, order):
        self.sent.append(order)


@pytest.fixture
def store():
    return LocalStore()


@pytest.fixture
def session_factory():
    engine = make_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def sql_repo(session_factory):
    return SqlOrderRepository(session_factory)


@pytest.fixture
def local_repo(store):
    return LocalOrderRepository(store)


@pytest.fixture
def gateway():
    return SimulatedPaymentGateway(settings.GATEWAY_KEY_ID, settings.GATEWAY_KEY_SECRET)


@pytest.fixture
def qr_renderer():
    return QRCodeRenderer(settings.QR_SERVICE_URL)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def catalog():
    return CatalogQueryService(PRODUCTS, CATEGORIES)


@pytest.fixture
def thushi(catalog):
    return catalog.get_product_by_id(1)


@pytest.fixture
def bangles(catalog):
    return catalog.get_product_by_id(3)


@pytest.fixture
def cart():
    return CartStore()


@pytest.fixture
def customer():
    return CustomerInfo(name="Asha Patil", email="asha@example.com", phone="9876543210", address="12 FC Road, Pune")


@pytest.fixture
async def workflow(cart, sql_repo, gateway, qr_renderer, notifier):
    wf = CheckoutWorkflow(
        cart,
        sql_repo,
        gateway,
        qr_renderer,
        notifier,
        clock=lambda: FIXED_NOW,
        success_delay=0.05,
        cod_delay=0.05,
    )
    yield wf
    wf.teardown()
