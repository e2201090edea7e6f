# storefront/services/order_service.py
import random
import string
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel
from storefront.data.models.order_item import OrderItemModel
from storefront.domain.enums import OrderStatus, PaymentStatus
from storefront.domain.errors import StorefrontError, NotFoundError, ValidationError
from storefront.domain.schemas import CheckoutIn, OrderOut, OrderUpdate
from storefront.repos.order_repo import OrderRepo
from storefront.repos.product_repo import ProductRepo
from storefront.services.notification_service import NotificationService
from storefront.services.saved_cart_service import MAX_TOTAL, normalize_cart_code
from storefront.utils.logging import get_logger
from storefront.utils.retry import OrderNumberCollision, order_number_retry

logger = get_logger(__name__)

ORDER_NUMBER_MAX_ATTEMPTS = 5


def generate_order_number() -> str:
    """Order number like ORD-20260104-A1B2C."""
    date_part = datetime.now(timezone.utc).strftime("%Y%m%d")
    random_part = "".join(random.choices(string.ascii_uppercase + string.digits, k=5))
    return f"ORD-{date_part}-{random_part}"


class OrderService:
    """
    Orders: the checkout stub creates them, the back-office lists them and
    moves them through their statuses.
    """

    def __init__(
        self,
        db: Session,
        notification_service: NotificationService | None = None,
        number_generator=generate_order_number,
    ):
        self.repo = OrderRepo(db)
        self.products = ProductRepo(db)
        self.notification_service = notification_service or NotificationService()
        self.number_generator = number_generator

    def list_orders(self) -> list[OrderOut]:
        return [OrderOut.model_validate(o) for o in self.repo.list_orders()]

    def update_order(self, payload: OrderUpdate) -> OrderOut:
        """
        Use case: admin changes status and/or payment status.
        Every other order field is read-only here.
        """
        order = self.repo.get_order(payload.id)
        if not order:
            raise NotFoundError("Order not found")

        changes = {
            field: value
            for field, value in payload.model_dump(
                mode="json", include={"status", "payment_status"}, exclude_unset=True
            ).items()
            if value is not None
        }

        if changes:
            previous = order.status
            order = self.repo.update_order(order, changes)
            logger.info(f"Order {order.order_number} updated: {previous} -> {order.status}, {changes}")

        return OrderOut.model_validate(order)

    def checkout(self, payload: CheckoutIn) -> OrderOut:
        """
        Use case: checkout stub.

        1. checks every product exists, is active and has the stock
        2. snapshots current prices into the order lines
        3. creates the order with payment left pending
        4. queues the order notification
        """
        if not payload.items:
            raise ValidationError("Order must have at least one item")

        products = self.products.get_products(i.product_id for i in payload.items)

        lines = []
        for item in payload.items:
            product = products.get(item.product_id)
            if not product or not product.is_active:
                raise ValidationError(f"Product {item.product_id} is not available")
            if item.quantity > product.stock:
                raise ValidationError(f"Only {product.stock} of {product.name} left in stock")

            lines.append(
                {
                    "product_id": product.id,
                    "product_name": product.name,
                    "product_number": product.product_number,
                    "quantity": item.quantity,
                    "price": product.price,
                }
            )

        total = sum((line["price"] * line["quantity"] for line in lines), Decimal("0.00"))
        if total > MAX_TOTAL:
            raise ValidationError("Order total is too large")

        created = self._insert_with_unique_number(payload, lines, total)
        logger.info(f"Order {created.order_number} created, total {created.total}")

        try:
            self.notification_service.send_order_notification(created.customer_email, created.order_number)
        except Exception as e:
            logger.warning(f"Failed to queue notification for order {created.order_number}: {e}")

        return OrderOut.model_validate(created)

    def _insert_with_unique_number(self, payload: CheckoutIn, lines: list[dict], total: Decimal) -> OrderModel:
        """Insert first, draw a new number when the unique index rejects it."""
        attempt = order_number_retry(ORDER_NUMBER_MAX_ATTEMPTS)(self._try_insert)
        try:
            return attempt(payload, lines, total)
        except OrderNumberCollision as e:
            logger.warning(
                f"No free order number after {ORDER_NUMBER_MAX_ATTEMPTS} attempts "
                f"(last tried {e.order_number})"
            )
            raise StorefrontError("Could not allocate an order number") from e

    def _try_insert(self, payload: CheckoutIn, lines: list[dict], total: Decimal) -> OrderModel:
        order_number = self.number_generator()

        order = OrderModel(
            order_number=order_number,
            cart_code=normalize_cart_code(payload.cart_code) if payload.cart_code else None,
            customer_name=payload.customer_name,
            customer_email=payload.customer_email,
            customer_phone=payload.customer_phone,
            shipping_city=payload.shipping_city,
            shipping_state=payload.shipping_state,
            status=OrderStatus.PENDING.value,
            total=total,
            payment_method=payload.payment_method,
            payment_status=PaymentStatus.PENDING.value,
            items=[OrderItemModel(**line) for line in lines],
        )

        try:
            return self.repo.create_order(order)
        except IntegrityError as e:
            self.repo.rollback()
            if "order_number" not in str(e.orig):
                raise
            logger.info(f"Order number {order_number} already taken, drawing a new one")
            raise OrderNumberCollision(order_number) from e
