import logging
from typing import List, Optional
from sqlalchemy import desc
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from app.interfaces.IOrderRepository import IOrderRepository
from app.domain.entities import (
    CODOrder,
    CustomerInfo,
    OrderLineItem,
    OrderRecord,
    OrderStatus,
    PaymentMethod,
)
from app.domain.models import Order
from app.infrastructure.database import SessionLocal

logger = logging.getLogger(__name__)


def _to_row(order: OrderRecord) -> Order:
    row = Order(
        order_id=order.order_id,
        gateway_order_id=order.gateway_order_id,
        payment_id=order.payment_id,
        payment_method=order.payment_method.value,
        status=order.status.value,
        amount=order.amount,
        currency=order.currency,
        customer_info=order.customer_info.model_dump(),
        items=[item.model_dump(mode="json") for item in order.line_items],
        created_at=order.created_at,
    )
    if isinstance(order, CODOrder):
        row.handling_fee = order.handling_fee
        row.total_amount = order.total_amount
        row.estimated_delivery = order.estimated_delivery_date
    return row


def _to_record(row: Order) -> OrderRecord:
    fields = dict(
        order_id=row.order_id,
        gateway_order_id=row.gateway_order_id,
        payment_id=row.payment_id,
        payment_method=PaymentMethod(row.payment_method),
        status=OrderStatus(row.status),
        amount=row.amount,
        currency=row.currency,
        customer_info=CustomerInfo.model_validate(row.customer_info or {}),
        line_items=[OrderLineItem.model_validate(i) for i in (row.items or [])],
        created_at=row.created_at,
    )
    if row.handling_fee is not None:
        return CODOrder(
            **fields,
            handling_fee=row.handling_fee,
            total_amount=row.total_amount,
            estimated_delivery_date=row.estimated_delivery,
        )
    return OrderRecord(**fields)


class SqlOrderRepository(IOrderRepository):

    def __init__(self, session_factory=SessionLocal):
        self.session_factory = session_factory

    def save_order(self, order: OrderRecord) -> bool:
        session = self.session_factory()
        try:
            session.add(_to_row(order))
            session.commit()
            return True
        except IntegrityError:
            # order_id is unique: ids are never reused
            logger.error(f"❌ Order {order.order_id} already exists")
            session.rollback()
            return False
        except SQLAlchemyError as e:
            logger.error(f"❌ DB Error: {e}")
            session.rollback()
            return False
        finally:
            session.close()

    def get_order(self, order_id: str) -> Optional[OrderRecord]:
        session = self.session_factory()
        try:
            row = session.query(Order).filter(Order.order_id == order_id).first()
            return _to_record(row) if row else None
        except SQLAlchemyError as e:
            logger.error(f"❌ DB Read Error: {e}")
            return None
        finally:
            session.close()

    def update_status(self, order_id: str, status: OrderStatus, payment_id: Optional[str] = None) -> bool:
        session = self.session_factory()
        try:
            row = session.query(Order).filter(Order.order_id == order_id).first()
            if not row:
                return False
            row.status = status.value
            if payment_id:
                row.payment_id = payment_id
            session.commit()
            return True
        except SQLAlchemyError as e:
            logger.error(f"❌ DB Error: {e}")
            session.rollback()
            return False
        finally:
            session.close()

    def find_by_gateway_order_id(self, gateway_order_id: str) -> Optional[OrderRecord]:
        session = self.session_factory()
        try:
            row = session.query(Order).filter(Order.gateway_order_id == gateway_order_id).first()
            return _to_record(row) if row else None
        except SQLAlchemyError as e:
            logger.error(f"❌ DB Read Error: {e}")
            return None
        finally:
            session.close()

    def get_all_orders(self, limit: int = 50) -> List[OrderRecord]:
        """
        Retrieves the latest orders from the database.
        Ordered by created_at DESC (Newest first).
        """
        session = self.session_factory()
        try:
            rows = session.query(Order).order_by(desc(Order.created_at)).limit(limit).all()
            return [_to_record(row) for row in rows]
        except SQLAlchemyError as e:
            logger.error(f"❌ DB Read Error: {e}")
            return []
        finally:
            session.close()
