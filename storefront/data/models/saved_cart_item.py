# storefront/data/models/saved_cart_item.py
from sqlalchemy import Column, Integer, ForeignKey, Numeric
from sqlalchemy.orm import relationship

from storefront.data.database import Base


class SavedCartItemModel(Base):
    __tablename__ = "saved_cart_items"

    id = Column(Integer, primary_key=True)
    saved_cart_id = Column(Integer, ForeignKey("saved_carts.id", ondelete="CASCADE"), nullable=False, index=True)
    #reference only, nulled when the product is deleted
    product_id = Column(Integer, ForeignKey("products.id", ondelete="SET NULL"), nullable=True)

    quantity = Column(Integer, nullable=False)
    price_at_add = Column(Numeric(10, 2), nullable=False)

    saved_cart = relationship("SavedCartModel", back_populates="items")
    product = relationship("ProductModel")
