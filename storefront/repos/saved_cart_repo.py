# storefront/repos/saved_cart_repo.py
from sqlalchemy import select, func
from sqlalchemy.orm import Session, selectinload

from storefront.data.models.saved_cart import SavedCartModel
from storefront.data.models.saved_cart_item import SavedCartItemModel


def _with_items():
    return selectinload(SavedCartModel.items).selectinload(SavedCartItemModel.product)


class SavedCartRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_cart(self, cart_id: int) -> SavedCartModel | None:
        return self.db.get(SavedCartModel, cart_id)

    def get_by_code(self, cart_code: str) -> SavedCartModel | None:
        return self.db.execute(
            select(SavedCartModel)
            .options(_with_items())
            .where(SavedCartModel.cart_code == cart_code)
        ).scalar_one_or_none()

    def list_carts(self) -> list[SavedCartModel]:
        return list(
            self.db.execute(
                select(SavedCartModel)
                .options(_with_items())
                .order_by(SavedCartModel.created_at.desc(), SavedCartModel.id.desc())
            ).scalars().all()
        )

    def count_items_by_code(self, cart_code: str) -> int:
        return self.db.execute(
            select(func.count(SavedCartItemModel.id))
            .select_from(SavedCartItemModel)
            .join(SavedCartModel, SavedCartModel.id == SavedCartItemModel.saved_cart_id)
            .where(SavedCartModel.cart_code == cart_code)
        ).scalar_one()

    def insert_cart(self, cart: SavedCartModel) -> SavedCartModel:
        """
        Cart and items go in one transaction; flush raises IntegrityError
        when cart_code is already taken.
        """
        self.db.add(cart)
        self.db.flush()
        self.db.commit()
        self.db.refresh(cart)
        return cart

    def delete_cart(self, cart: SavedCartModel) -> None:
        self.db.delete(cart)
        self.db.commit()

    def rollback(self):
        self.db.rollback()
