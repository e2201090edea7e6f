# storefront/services/guest_cart_service.py
import uuid

from sqlalchemy.orm import Session

from storefront.domain.errors import NotFoundError, ValidationError
from storefront.domain.schemas import CartLine, CartStateOut, ProductSummaryOut, SavedCartCreate, SavedCartOut
from storefront.repos.product_repo import ProductRepo
from storefront.services.cart_context import CartContext, clamp_quantity
from storefront.services.cart_storage import CartStorage
from storefront.services.saved_cart_service import SavedCartService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class GuestCartService:
    """
    Glue between a guest's CartContext, the catalog and the saved cart
    manager: add products, save the cart under a code, load it back.
    """

    def __init__(self, db: Session, storage: CartStorage, saved_carts: SavedCartService | None = None):
        self.products = ProductRepo(db)
        self.saved_carts = saved_carts or SavedCartService(db)
        self.storage = storage

    def context(self, session_key: str) -> CartContext:
        return CartContext(self.storage, session_key)

    def get_cart(self, session_key: str) -> CartStateOut:
        return self.context(session_key).state()

    def add_product(self, session_key: str, product_id: int) -> CartStateOut:
        product = self.products.get_product(product_id)
        if not product or not product.is_active:
            raise NotFoundError("Product not found")

        cart = self.context(session_key)
        cart.add_item(ProductSummaryOut.model_validate(product))
        return cart.state()

    def update_quantity(self, session_key: str, line_id: str, quantity: int) -> CartStateOut:
        cart = self.context(session_key)
        cart.update_quantity(line_id, quantity)
        return cart.state()

    def remove_item(self, session_key: str, line_id: str) -> CartStateOut:
        cart = self.context(session_key)
        cart.remove_item(line_id)
        return cart.state()

    def clear(self, session_key: str) -> CartStateOut:
        cart = self.context(session_key)
        cart.clear()
        return cart.state()

    def save(self, session_key: str, email: str | None = None) -> SavedCartOut:
        cart = self.context(session_key)
        if not cart.items:
            raise ValidationError("Cart must have at least one item")

        return self.saved_carts.create_saved_cart(
            SavedCartCreate(email=email, items=cart.to_saved_cart_items())
        )

    def load(self, session_key: str, cart_code: str) -> CartStateOut:
        """
        Replace the guest cart with a saved one. Lines take the product's
        current price and stock, quantities are clamped to what is in stock,
        and products that are gone, hidden or sold out are dropped.
        """
        saved = self.saved_carts.get_by_code(cart_code)

        lines = []
        skipped = 0
        for item in saved.items:
            product = item.product
            if product is None or not product.is_active or product.stock <= 0:
                skipped += 1
                continue

            lines.append(
                CartLine(
                    id=f"cart-{uuid.uuid4().hex}",
                    product_id=product.id,
                    name=product.name,
                    product_number=product.product_number,
                    image=product.image_url,
                    price=product.price,
                    quantity=clamp_quantity(item.quantity, product.stock),
                    stock=product.stock,
                )
            )

        cart = self.context(session_key)
        cart.replace(lines)

        logger.info(
            f"Loaded saved cart {saved.cart_code} into session {session_key}: "
            f"{len(lines)} line(s), {skipped} skipped"
        )
        return cart.state()
