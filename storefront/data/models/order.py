# storefront/data/models/order.py
from sqlalchemy import Column, Integer, String, DateTime, Numeric
from sqlalchemy.orm import relationship
from datetime import datetime, timezone

from storefront.data.database import Base


class OrderModel(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True)
    order_number = Column(String(32), nullable=False, unique=True, index=True)
    cart_code = Column(String(16), nullable=True)  # saved cart it came from, not enforced

    customer_name = Column(String(200), nullable=False)
    customer_email = Column(String(320), nullable=False)
    customer_phone = Column(String(40), nullable=True)
    shipping_city = Column(String(120), nullable=True)
    shipping_state = Column(String(120), nullable=True)

    status = Column(String, nullable=False, default="pending")  # pending, processing, shipped, delivered, cancelled
    total = Column(Numeric(12, 2), nullable=False)
    payment_method = Column(String(40), nullable=False)
    payment_status = Column(String(40), nullable=False, default="pending")
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    items = relationship(
        "OrderItemModel",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItemModel.id",
    )
