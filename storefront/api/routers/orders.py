# storefront/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.errors import StorefrontError
from storefront.domain.schemas import OrderOut, OrderUpdate
from storefront.services.order_service import OrderService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/admin/orders", tags=["admin: orders"])


def get_service(db: Session):
    return OrderService(db)


@router.get("", response_model=List[OrderOut])
def list_orders(db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.list_orders()
    except SQLAlchemyError:
        logger.exception("Error fetching orders")
        raise HTTPException(status_code=500, detail="Failed to fetch orders")


@router.put("", response_model=OrderOut)
def update_order(payload: OrderUpdate, db: Session = Depends(get_db)):
    """
    Changes status and/or paymentStatus, nothing else.
    """
    svc = get_service(db)
    try:
        return svc.update_order(payload)
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    except SQLAlchemyError:
        logger.exception("Error updating order")
        raise HTTPException(status_code=500, detail="Failed to update order")
