# storefront/data/models/saved_cart.py
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, Numeric
from sqlalchemy.orm import relationship

from storefront.data.database import Base


class SavedCartModel(Base):
    __tablename__ = "saved_carts"

    id = Column(Integer, primary_key=True)
    cart_code = Column(String(16), nullable=False, unique=True, index=True)
    email = Column(String(320), nullable=True)

    total_amount = Column(Numeric(12, 2), nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    items = relationship(
        "SavedCartItemModel",
        back_populates="saved_cart",
        cascade="all, delete-orphan",
        order_by="SavedCartItemModel.id",
    )
