# storefront/services/cart_context.py
import uuid
from decimal import Decimal

from pydantic import ValidationError as SchemaError

from storefront.domain.errors import NotFoundError, ValidationError
from storefront.domain.schemas import CartLine, CartStateOut, ProductSummaryOut, SavedCartItemIn
from storefront.services.cart_storage import CartStorage
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def clamp_quantity(quantity: int, stock: int) -> int:
    return max(1, min(quantity, stock))


class CartContext:
    """
    A shopper's cart before it is saved: ordered lines with the price and
    stock seen when each product was added. Every change is written through
    to the injected storage.
    """

    def __init__(self, storage: CartStorage, key: str):
        self.storage = storage
        self.key = key
        self.items: list[CartLine] = self._load()

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.items)

    @property
    def total(self) -> Decimal:
        return sum((line.price * line.quantity for line in self.items), Decimal("0.00"))

    def state(self) -> CartStateOut:
        return CartStateOut(items=list(self.items), item_count=self.item_count, total=self.total)

    def add_item(self, product: ProductSummaryOut) -> CartLine:
        existing = self._find_by_product(product.id)

        if existing:
            existing.quantity = min(existing.quantity + 1, existing.stock)
            self._persist()
            return existing

        if product.stock <= 0:
            raise ValidationError(f"{product.name} is out of stock")

        line = CartLine(
            id=f"cart-{uuid.uuid4().hex}",
            product_id=product.id,
            name=product.name,
            product_number=product.product_number,
            image=product.image_url,
            price=product.price,
            quantity=1,
            stock=product.stock,
        )
        self.items.append(line)
        self._persist()
        return line

    def update_quantity(self, line_id: str, quantity: int) -> CartLine:
        line = self._get(line_id)
        line.quantity = clamp_quantity(quantity, line.stock)
        self._persist()
        return line

    def remove_item(self, line_id: str) -> None:
        line = self._get(line_id)
        self.items.remove(line)
        self._persist()

    def replace(self, lines: list[CartLine]) -> None:
        self.items = list(lines)
        self._persist()

    def clear(self) -> None:
        self.items = []
        self.storage.clear(self.key)

    def to_saved_cart_items(self) -> list[SavedCartItemIn]:
        return [
            SavedCartItemIn(
                product_id=line.product_id,
                quantity=line.quantity,
                price_at_add=line.price,
            )
            for line in self.items
        ]

    def _find_by_product(self, product_id: int) -> CartLine | None:
        return next((line for line in self.items if line.product_id == product_id), None)

    def _get(self, line_id: str) -> CartLine:
        for line in self.items:
            if line.id == line_id:
                return line
        raise NotFoundError("Cart item not found")

    def _load(self) -> list[CartLine]:
        try:
            raw = self.storage.load(self.key)
        except ValueError as e:
            logger.error(f"Error loading cart {self.key}: {e}")
            return []

        if not raw:
            return []

        try:
            return [CartLine.model_validate(line) for line in raw]
        except SchemaError as e:
            logger.error(f"Error loading cart {self.key}: {e}")
            return []

    def _persist(self) -> None:
        self.storage.save(
            self.key,
            [line.model_dump(mode="json", by_alias=True) for line in self.items],
        )
