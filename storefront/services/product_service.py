# storefront/services/product_service.py
from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel
from storefront.domain.errors import ConflictError, NotFoundError, ValidationError
from storefront.domain.schemas import ProductCreate, ProductUpdate, ProductOut
from storefront.repos.category_repo import CategoryRepo
from storefront.repos.product_repo import ProductRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

# columns that can't be set to NULL through a patch
_REQUIRED_FIELDS = {"name", "product_number", "price", "stock", "category_id", "image_url", "is_active"}


class ProductService:
    """
    Admin CRUD over the catalog plus the read side the shop uses
    (active products only).
    """

    def __init__(self, db: Session):
        self.repo = ProductRepo(db)
        self.categories = CategoryRepo(db)

    # =====================================================
    # QUERY
    # =====================================================
    def list_products(self, category_id: int | None = None) -> list[ProductOut]:
        return [
            ProductOut.model_validate(p)
            for p in self.repo.list_products(category_id=category_id)
        ]

    def list_active_products(self, category_slug: str | None = None) -> list[ProductOut]:
        return [
            ProductOut.model_validate(p)
            for p in self.repo.list_products(category_slug=category_slug, active_only=True)
        ]

    def get_active_product(self, product_id: int) -> ProductOut:
        product = self.repo.get_product(product_id)
        if not product or not product.is_active:
            raise NotFoundError("Product not found")
        return ProductOut.model_validate(product)

    # =====================================================
    # COMMANDS
    # =====================================================
    def create_product(self, payload: ProductCreate) -> ProductOut:
        if self.repo.get_by_number(payload.product_number):
            raise ConflictError("Product number already exists")

        if not self.categories.get_category(payload.category_id):
            raise ValidationError("Category not found")

        created = self.repo.create_product(ProductModel(**payload.model_dump()))

        logger.info(f"Created product {created.id} ({created.product_number})")
        return ProductOut.model_validate(created)

    def update_product(self, payload: ProductUpdate) -> ProductOut:
        product = self.repo.get_product(payload.id)
        if not product:
            raise NotFoundError("Product not found")

        changes = {
            field: value
            for field, value in payload.model_dump(exclude_unset=True, exclude={"id"}).items()
            if value is not None or field not in _REQUIRED_FIELDS
        }

        number = changes.get("product_number")
        if number and number != product.product_number and self.repo.get_by_number(number):
            raise ConflictError("Product number already exists")

        category_id = changes.get("category_id")
        if category_id and not self.categories.get_category(category_id):
            raise ValidationError("Category not found")

        for field, value in changes.items():
            setattr(product, field, value)

        updated = self.repo.save(product)

        logger.info(f"Updated product {updated.id}: {sorted(changes)}")
        return ProductOut.model_validate(updated)

    def delete_product(self, product_id: int) -> None:
        product = self.repo.get_product(product_id)
        if not product:
            raise NotFoundError("Product not found")

        self.repo.delete_product(product)
        logger.info(f"Deleted product {product_id}")
