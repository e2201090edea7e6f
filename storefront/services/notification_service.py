# storefront/services/notification_service.py
from decimal import Decimal

from storefront.celery_worker import celery_app
from storefront.utils.settings import STORE_NAME, CURRENCY_SYMBOL, SAVED_CART_TTL_DAYS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def _money(value) -> str:
    return f"{CURRENCY_SYMBOL}{Decimal(str(value)):,.2f}"


def format_saved_cart_email(cart_code: str, items: list[dict], total) -> str:
    """
    Body of the "your cart was saved" email.

    items: dicts with name, product_number, quantity and price (unit price).
    """
    lines = "\n".join(
        f"- {i['name']} ({i['product_number']}) - Qty: {i['quantity']} - "
        f"{_money(Decimal(str(i['price'])) * i['quantity'])}"
        for i in items
    )

    return (
        "Hello!\n\n"
        f"Your cart has been saved successfully at {STORE_NAME}.\n\n"
        f"CART CODE: {cart_code}\n"
        "Please save this code to retrieve your cart later. "
        f"This cart will expire in {SAVED_CART_TTL_DAYS} days.\n\n"
        "YOUR CART ITEMS:\n"
        f"{lines}\n\n"
        f"TOTAL: {_money(total)}\n\n"
        f"To load your cart later, visit our website and enter your cart code: {cart_code}\n\n"
        f"Thank you for shopping with {STORE_NAME}!\n\n"
        "---\n"
        f"{STORE_NAME}"
    )


class NotificationService:
    """
    Outbound notifications, queued on Celery.
    Nothing is actually delivered, the tasks only log.
    """

    @staticmethod
    def send_saved_cart_email(email: str, cart_code: str, items: list[dict], total):
        send_saved_cart_email_task.delay(email, cart_code, items, str(total))

    @staticmethod
    def send_order_notification(customer_email: str, order_number: str):
        send_order_notification_task.delay(customer_email, order_number)


@celery_app.task(name="storefront.services.notification_service.send_saved_cart_email_task")
def send_saved_cart_email_task(email: str, cart_code: str, items: list[dict], total: str):
    """
    Celery task, in a real deployment this would hand the message to an
    email provider. For now it only logs.
    """
    content = format_saved_cart_email(cart_code, items, total)

    logger.info(f"[EMAIL] Email would be sent to: {email}")
    logger.info(f"[EMAIL] Subject: Your Saved Cart - {cart_code}\n{content}")

    return {"email": email, "cart_code": cart_code, "status": "logged"}


@celery_app.task(name="storefront.services.notification_service.send_order_notification_task")
def send_order_notification_task(customer_email: str, order_number: str):
    logger.info(f"[NOTIFICATION] {customer_email}: Order {order_number} received, payment pending")

    return {"email": customer_email, "order_number": order_number, "status": "logged"}
