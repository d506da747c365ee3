from abc import ABC, abstractmethod
from typing import List, Optional

from app.domain.entities import OrderRecord, OrderStatus

class IOrderRepository(ABC):
    @abstractmethod
    def save_order(self, order: OrderRecord) -> bool:
        """False when the record could not be stored, including a reused order id."""
        pass

    @abstractmethod
    def get_order(self, order_id: str) -> Optional[OrderRecord]:
        pass

    @abstractmethod
    def update_status(self, order_id: str, status: OrderStatus, payment_id: Optional[str] = None) -> bool:
        pass

    @abstractmethod
    def find_by_gateway_order_id(self, gateway_order_id: str) -> Optional[OrderRecord]:
        pass

    @abstractmethod
    def get_all_orders(self, limit: int = 50) -> List[OrderRecord]:
        pass
