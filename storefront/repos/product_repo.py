# storefront/repos/product_repo.py
from sqlalchemy import select, update
from sqlalchemy.orm import Session, selectinload

from storefront.data.models.category import CategoryModel
from storefront.data.models.product import ProductModel
from storefront.data.models.saved_cart_item import SavedCartItemModel
from storefront.data.models.order_item import OrderItemModel


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_product(self, product_id: int) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def get_products(self, product_ids) -> dict[int, ProductModel]:
        ids = set(product_ids)
        if not ids:
            return {}
        rows = self.db.execute(
            select(ProductModel).where(ProductModel.id.in_(ids))
        ).scalars().all()
        return {p.id: p for p in rows}

    def get_by_number(self, product_number: str) -> ProductModel | None:
        return self.db.execute(
            select(ProductModel).where(ProductModel.product_number == product_number)
        ).scalar_one_or_none()

    def list_products(
        self,
        category_id: int | None = None,
        category_slug: str | None = None,
        active_only: bool = False,
    ) -> list[ProductModel]:
        stmt = select(ProductModel).options(selectinload(ProductModel.category))

        if category_id is not None:
            stmt = stmt.where(ProductModel.category_id == category_id)
        if category_slug is not None:
            stmt = stmt.join(ProductModel.category).where(CategoryModel.slug == category_slug)
        if active_only:
            stmt = stmt.where(ProductModel.is_active.is_(True))

        stmt = stmt.order_by(ProductModel.created_at.desc(), ProductModel.id.desc())
        return list(self.db.execute(stmt).scalars().all())

    def create_product(self, product: ProductModel) -> ProductModel:
        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)
        return product

    def save(self, product: ProductModel) -> ProductModel:
        self.db.commit()
        self.db.refresh(product)
        return product

    def delete_product(self, product: ProductModel) -> None:
        #saved cart and order lines keep their price snapshot, only the link goes
        for model in (SavedCartItemModel, OrderItemModel):
            self.db.execute(
                update(model)
                .where(model.product_id == product.id)
                .values(product_id=None)
            )
        self.db.delete(product)
        self.db.commit()
