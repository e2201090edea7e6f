# storefront/repos/category_repo.py
from sqlalchemy import select, func, or_
from sqlalchemy.orm import Session

from storefront.data.models.category import CategoryModel
from storefront.data.models.product import ProductModel


class CategoryRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_category(self, category_id: int) -> CategoryModel | None:
        return self.db.get(CategoryModel, category_id)

    def get_by_slug(self, slug: str) -> CategoryModel | None:
        return self.db.execute(
            select(CategoryModel).where(CategoryModel.slug == slug)
        ).scalar_one_or_none()

    def find_by_name_or_slug(
        self,
        name: str,
        slug: str,
        exclude_id: int | None = None,
    ) -> CategoryModel | None:
        stmt = select(CategoryModel).where(
            or_(CategoryModel.name == name, CategoryModel.slug == slug)
        )
        if exclude_id is not None:
            stmt = stmt.where(CategoryModel.id != exclude_id)
        return self.db.execute(stmt.limit(1)).scalars().first()

    def list_with_counts(self) -> list[tuple[CategoryModel, int]]:
        counts = (
            select(ProductModel.category_id, func.count(ProductModel.id).label("cnt"))
            .group_by(ProductModel.category_id)
            .subquery()
        )
        rows = self.db.execute(
            select(CategoryModel, func.coalesce(counts.c.cnt, 0))
            .outerjoin(counts, counts.c.category_id == CategoryModel.id)
            .order_by(CategoryModel.name.asc())
        ).all()
        return [(category, count) for category, count in rows]

    def count_products(self, category_id: int) -> int:
        return self.db.execute(
            select(func.count(ProductModel.id)).where(ProductModel.category_id == category_id)
        ).scalar_one()

    def create_category(self, category: CategoryModel) -> CategoryModel:
        self.db.add(category)
        self.db.commit()
        self.db.refresh(category)
        return category

    def save(self, category: CategoryModel) -> CategoryModel:
        self.db.commit()
        self.db.refresh(category)
        return category

    def delete_category(self, category: CategoryModel) -> None:
        self.db.delete(category)
        self.db.commit()
