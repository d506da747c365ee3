from sqlalchemy import Column, Date, DateTime, Integer, JSON, Numeric, String
from sqlalchemy.sql import func
from app.infrastructure.database import Base

class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(String, unique=True, index=True, nullable=False)
    gateway_order_id = Column(String, index=True, nullable=True)
    payment_id = Column(String, nullable=True)

    payment_method = Column(String, nullable=False)  # gateway, cod
    status = Column(String, default="pending")  # pending, processing, completed, failed, cancelled

    amount = Column(Numeric(12, 2), nullable=False)
    currency = Column(String, default="INR")

    # Customer details and line items are snapshots taken at checkout time,
    # so they live on the order row as JSON rather than in their own tables.
    customer_info = Column(JSON)
    items = Column(JSON)

    # Cash on delivery only
    handling_fee = Column(Numeric(12, 2), nullable=True)
    total_amount = Column(Numeric(12, 2), nullable=True)
    estimated_delivery = Column(Date, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
