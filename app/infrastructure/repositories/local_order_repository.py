import json
import logging
from typing import List, Optional

from pydantic import ValidationError

from app.domain.entities import CODOrder, OrderRecord, OrderStatus
from app.infrastructure.local_store import LocalStore
from app.interfaces.IOrderRepository import IOrderRepository

logger = logging.getLogger(__name__)

KEY_PREFIX = "order_"


class LocalOrderRepository(IOrderRepository):
    """Order records kept one per key (order_<id>) in the shopper-side LocalStore."""

    def __init__(self, store: LocalStore):
        self.store = store

    def _key(self, order_id: str) -> str:
        return f"{KEY_PREFIX}{order_id}"

    def save_order(self, order: OrderRecord) -> bool:
        key = self._key(order.order_id)
        if self.store.exists(key):
            logger.error(f"❌ Order {order.order_id} already exists")
            return False
        self.store.set(key, order.model_dump_json())
        return True

    def get_order(self, order_id: str) -> Optional[OrderRecord]:
        raw = self.store.get(self._key(order_id))
        if raw is None:
            return None
        try:
            data = json.loads(raw)
            if data.get("handling_fee") is not None:
                return CODOrder.model_validate(data)
            return OrderRecord.model_validate(data)
        except (json.JSONDecodeError, AttributeError, ValidationError) as e:
            logger.error(f"❌ Error reading order {order_id}: {e}")
            return None

    def update_status(self, order_id: str, status: OrderStatus, payment_id: Optional[str] = None) -> bool:
        order = self.get_order(order_id)
        if order is None:
            return False
        update = {"status": status}
        if payment_id:
            update["payment_id"] = payment_id
        self.store.set(self._key(order_id), order.model_copy(update=update).model_dump_json())
        return True

    def find_by_gateway_order_id(self, gateway_order_id: str) -> Optional[OrderRecord]:
        for order in self._all():
            if order.gateway_order_id == gateway_order_id:
                return order
        return None

    def get_all_orders(self, limit: int = 50) -> List[OrderRecord]:
        orders = sorted(self._all(), key=lambda o: o.created_at, reverse=True)
        return orders[:limit]

    def _all(self) -> List[OrderRecord]:
        orders = []
        for key in self.store.keys(KEY_PREFIX):
            order = self.get_order(key[len(KEY_PREFIX):])
            if order is not None:
                orders.append(order)
        return orders
