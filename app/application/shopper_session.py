import logging
import time
from typing import Callable, Dict

from app.application.cart_store import CartStore
from app.application.checkout_workflow import CheckoutWorkflow
from app.application.favorites_store import FavoritesStore
from app.core.config import settings
from app.infrastructure.local_store import LocalStore
from app.infrastructure.upi_qr import QRCodeRenderer
from app.interfaces.IOrderRepository import IOrderRepository
from app.interfaces.IPaymentGateway import IPaymentGateway

logger = logging.getLogger(__name__)


class ShopperSession:
    def __init__(self, session_id: str, cart: CartStore, favorites: FavoritesStore, checkout: CheckoutWorkflow):
        self.session_id = session_id
        self.cart = cart
        self.favorites = favorites
        self.checkout = checkout
        self.last_seen = 0.0

    def end(self):
        self.checkout.teardown()


class SessionRegistry:
    """
    Owns every live shopper session. Sessions are built on first use with
    the shared store, repository and gateway. A session idle for longer than
    `ttl` seconds is ended the next time the registry is used.
    """

    def __init__(
        self,
        store: LocalStore,
        order_repo: IOrderRepository,
        gateway: IPaymentGateway,
        qr_renderer: QRCodeRenderer,
        notifier=None,
        *,
        favorites_key: str,
        ttl: float = settings.SESSION_TTL,
        idle_clock: Callable[[], float] = time.monotonic,
        **workflow_options,
    ):
        self.store = store
        self.order_repo = order_repo
        self.gateway = gateway
        self.qr_renderer = qr_renderer
        self.notifier = notifier
        self.favorites_key = favorites_key
        self.ttl = ttl
        self.idle_clock = idle_clock
        self.workflow_options = workflow_options
        self._sessions: Dict[str, ShopperSession] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def get(self, session_id: str) -> ShopperSession:
        now = self.idle_clock()
        self.expire_idle(now)

        session = self._sessions.get(session_id)
        if session is None:
            session = self._start(session_id)
            self._sessions[session_id] = session
        session.last_seen = now
        return session

    def expire_idle(self, now: float) -> int:
        expired = [sid for sid, s in self._sessions.items() if now - s.last_seen > self.ttl]
        for session_id in expired:
            logger.info(f"⌛ Session {session_id} idle for more than {self.ttl}s")
            self.end(session_id)
        return len(expired)

    def _start(self, session_id: str) -> ShopperSession:
        cart = CartStore()
        favorites = FavoritesStore(self.store, key=f"{self.favorites_key}:{session_id}")
        checkout = CheckoutWorkflow(
            cart,
            self.order_repo,
            self.gateway,
            self.qr_renderer,
            self.notifier,
            **self.workflow_options,
        )
        logger.info(f"🛍️ Session {session_id} started")
        return ShopperSession(session_id, cart, favorites, checkout)

    def end(self, session_id: str) -> bool:
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        session.end()
        logger.info(f"🛍️ Session {session_id} ended")
        return True

    def end_all(self):
        for session_id in list(self._sessions):
            self.end(session_id)
