# storefront/api/routers/emails.py
from fastapi import APIRouter, HTTPException

from storefront.domain.schemas import CartEmailIn, CartEmailOut
from storefront.services.notification_service import NotificationService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["notifications"])


@router.post("/api/send-cart-email", response_model=CartEmailOut)
def send_cart_email(payload: CartEmailIn):
    """
    Stub: queues the saved-cart email, the task only logs it.
    """
    items = [item.model_dump(mode="json") for item in payload.items]
    try:
        NotificationService.send_saved_cart_email(payload.email, payload.cart_code, items, payload.total)
    except Exception:
        logger.exception("Error sending email")
        raise HTTPException(status_code=500, detail="Failed to send email")

    return {"success": True, "message": "Email sent successfully"}
