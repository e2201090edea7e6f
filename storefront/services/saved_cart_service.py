# storefront/services/saved_cart_service.py
import random
from datetime import timedelta
from decimal import Decimal

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.data.models.saved_cart import SavedCartModel
from storefront.data.models.saved_cart_item import SavedCartItemModel
from storefront.domain.errors import StorefrontError, ValidationError, NotFoundError, ExpiredError
from storefront.domain.schemas import SavedCartCreate, SavedCartOut, SavedCartListOut
from storefront.repos.product_repo import ProductRepo
from storefront.repos.saved_cart_repo import SavedCartRepo
from storefront.services.notification_service import NotificationService
from storefront.utils.clock import utc_now, is_past
from storefront.utils.retry import CartCodeCollision, cart_code_retry
from storefront.utils.settings import CART_CODE_PREFIX, CART_CODE_MAX_ATTEMPTS, SAVED_CART_TTL_DAYS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

# ED-#### first, ED-###### once the short space keeps colliding
CODE_DIGITS = (4, 6)

# largest amount a Numeric(12, 2) total column holds
MAX_TOTAL = Decimal("9999999999.99")


def generate_cart_code(digits: int = 4) -> str:
    low = 10 ** (digits - 1)
    return f"{CART_CODE_PREFIX}-{random.randint(low, 10 ** digits - 1)}"


def normalize_cart_code(cart_code: str) -> str:
    return (cart_code or "").strip().upper()


class SavedCartService:
    """
    Saved cart lifecycle: a priced snapshot of a shopper's cart stored under a
    short shareable code, valid for SAVED_CART_TTL_DAYS.

    commands: create, delete
    queries: get by code (rejects expired carts), list, item count
    """

    def __init__(
        self,
        db: Session,
        notification_service: NotificationService | None = None,
        code_generator=generate_cart_code,
    ):
        self.repo = SavedCartRepo(db)
        self.products = ProductRepo(db)
        self.notification_service = notification_service or NotificationService()
        self.code_generator = code_generator

    # =====================================================
    # QUERY
    # =====================================================
    def get_by_code(self, cart_code: str) -> SavedCartOut:
        cart = self.repo.get_by_code(normalize_cart_code(cart_code))

        if not cart:
            raise NotFoundError("Cart not found")

        # expired carts stay in the table, they just can't be loaded
        if is_past(cart.expires_at):
            logger.info(f"Saved cart {cart.cart_code} requested after expiry")
            raise ExpiredError("Cart has expired")

        return SavedCartOut.model_validate(cart)

    def list_carts(self) -> list[SavedCartListOut]:
        now = utc_now()
        return [
            SavedCartListOut.model_validate(cart).model_copy(
                update={
                    "item_count": len(cart.items),
                    "is_expired": is_past(cart.expires_at, now),
                }
            )
            for cart in self.repo.list_carts()
        ]

    def count_items(self, cart_code: str) -> int:
        return self.repo.count_items_by_code(cart_code)

    # =====================================================
    # COMMANDS
    # =====================================================
    def create_saved_cart(self, payload: SavedCartCreate) -> SavedCartOut:
        if not payload.items:
            raise ValidationError("Cart must have at least one item")

        product_ids = {i.product_id for i in payload.items}
        missing = sorted(product_ids - self.products.get_products(product_ids).keys())
        if missing:
            raise ValidationError(f"Unknown product id(s): {', '.join(map(str, missing))}")

        # total is fixed at save time from the snapshot prices
        total = sum((i.price_at_add * i.quantity for i in payload.items), Decimal("0.00"))
        if total > MAX_TOTAL:
            raise ValidationError("Cart total is too large")

        cart = self._insert_with_unique_code(payload, total)
        created = SavedCartOut.model_validate(cart)

        logger.info(
            f"Saved cart {created.cart_code} created with {len(created.items)} item(s), "
            f"total {created.total_amount}"
        )

        if created.email:
            self._notify(created)

        return created

    def delete_cart(self, cart_id: int) -> None:
        cart = self.repo.get_cart(cart_id)
        if not cart:
            raise NotFoundError("Cart not found")

        self.repo.delete_cart(cart)
        logger.info(f"Saved cart {cart_id} deleted")

    # =====================================================
    # HELPERS
    # =====================================================
    def _insert_with_unique_code(self, payload: SavedCartCreate, total: Decimal) -> SavedCartModel:
        """
        Insert first, retry on a cart_code unique violation. The database
        constraint is the only uniqueness check, so two concurrent saves can't
        both end up with the same code.
        """
        attempt = cart_code_retry(CART_CODE_MAX_ATTEMPTS)(self._try_insert)

        for digits in CODE_DIGITS:
            try:
                return attempt(payload, total, digits)
            except CartCodeCollision as e:
                logger.warning(
                    f"No free {digits}-digit cart code after {CART_CODE_MAX_ATTEMPTS} "
                    f"attempts (last tried {e.cart_code})"
                )

        raise StorefrontError("Could not allocate a unique cart code")

    def _try_insert(self, payload: SavedCartCreate, total: Decimal, digits: int) -> SavedCartModel:
        cart_code = self.code_generator(digits)
        now = utc_now()

        cart = SavedCartModel(
            cart_code=cart_code,
            email=payload.email,
            total_amount=total,
            created_at=now,
            expires_at=now + timedelta(days=SAVED_CART_TTL_DAYS),
            items=[
                SavedCartItemModel(
                    product_id=i.product_id,
                    quantity=i.quantity,
                    price_at_add=i.price_at_add,
                )
                for i in payload.items
            ],
        )

        try:
            return self.repo.insert_cart(cart)
        except IntegrityError as e:
            self.repo.rollback()
            if "cart_code" not in str(e.orig):
                raise
            logger.info(f"Cart code {cart_code} already taken, drawing a new one")
            raise CartCodeCollision(cart_code) from e

    def _notify(self, cart: SavedCartOut):
        items = [
            {
                "name": i.product.name if i.product else f"Product {i.product_id}",
                "product_number": i.product.product_number if i.product else "-",
                "quantity": i.quantity,
                "price": str(i.price_at_add),
            }
            for i in cart.items
        ]

        # fire and forget, the cart is already committed
        try:
            self.notification_service.send_saved_cart_email(
                cart.email, cart.cart_code, items, cart.total_amount
            )
        except Exception as e:
            logger.warning(f"Failed to queue saved cart email for {cart.cart_code}: {e}")
