# storefront/services/category_service.py
from sqlalchemy.orm import Session

from storefront.data.models.category import CategoryModel
from storefront.domain.errors import ConflictError, NotFoundError, ValidationError
from storefront.domain.schemas import (
    CategoryCreate,
    CategoryUpdate,
    CategoryOut,
    CategoryWithCountOut,
)
from storefront.repos.category_repo import CategoryRepo
from storefront.utils.slug import slugify
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CategoryService:
    def __init__(self, db: Session):
        self.repo = CategoryRepo(db)

    def list_categories(self) -> list[CategoryWithCountOut]:
        return [
            CategoryWithCountOut.model_validate(category).model_copy(
                update={"products_count": count}
            )
            for category, count in self.repo.list_with_counts()
        ]

    def create_category(self, payload: CategoryCreate) -> CategoryOut:
        name = payload.name.strip()
        slug = self._slug_for(name)

        if self.repo.find_by_name_or_slug(name, slug):
            raise ConflictError("Category name or slug already exists")

        created = self.repo.create_category(
            CategoryModel(
                name=name,
                slug=slug,
                description=payload.description or None,
            )
        )
        logger.info(f"Created category {created.id} ({created.slug})")
        return CategoryOut.model_validate(created)

    def update_category(self, payload: CategoryUpdate) -> CategoryOut:
        category = self.repo.get_category(payload.id)
        if not category:
            raise NotFoundError("Category not found")

        changes = payload.model_dump(exclude_unset=True, exclude={"id"})

        #slug follows the name, only when a name was sent
        if changes.get("name") is not None:
            name = changes["name"].strip()
            slug = self._slug_for(name)
            if self.repo.find_by_name_or_slug(name, slug, exclude_id=category.id):
                raise ConflictError("Category name or slug already exists")
            category.name = name
            category.slug = slug

        if "description" in changes:
            category.description = changes["description"] or None

        updated = self.repo.save(category)
        logger.info(f"Updated category {updated.id}")
        return CategoryOut.model_validate(updated)

    def delete_category(self, category_id: int) -> None:
        category = self.repo.get_category(category_id)
        if not category:
            raise NotFoundError("Category not found")

        products_count = self.repo.count_products(category_id)
        if products_count > 0:
            raise ConflictError(
                f"Cannot delete category. It has {products_count} product(s). "
                "Please move or delete the products first."
            )

        self.repo.delete_category(category)
        logger.info(f"Deleted category {category_id}")

    @staticmethod
    def _slug_for(name: str) -> str:
        if not name:
            raise ValidationError("Category name is required")
        slug = slugify(name)
        if not slug:
            raise ValidationError("Category name must contain at least one letter or digit")
        return slug
