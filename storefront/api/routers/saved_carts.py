# storefront/api/routers/saved_carts.py
from typing import List, Union

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.errors import StorefrontError
from storefront.domain.schemas import SavedCartCreate, SavedCartOut, SavedCartListOut, MessageOut
from storefront.services.saved_cart_service import SavedCartService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/admin/saved-carts", tags=["admin: saved carts"])


def get_service(db: Session):
    return SavedCartService(db)


@router.get("", response_model=Union[SavedCartOut, List[SavedCartListOut]])
def get_saved_carts(
    cart_code: str | None = Query(None, alias="cartCode"),
    db: Session = Depends(get_db),
):
    """
    ?cartCode=ED-1234 returns that cart (404 unknown, 410 expired),
    without it every cart, newest first.
    """
    svc = get_service(db)
    try:
        if cart_code:
            return svc.get_by_code(cart_code)
        return svc.list_carts()
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    except SQLAlchemyError:
        logger.exception("Error fetching saved carts")
        raise HTTPException(status_code=500, detail="Failed to fetch saved carts")


@router.post("", response_model=SavedCartOut, status_code=201)
def create_saved_cart(payload: SavedCartCreate, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.create_saved_cart(payload)
    except StorefrontError as e:
        if e.status_code >= 500:
            logger.exception("Error creating saved cart")
            raise HTTPException(status_code=500, detail="Failed to create saved cart")
        raise HTTPException(status_code=e.status_code, detail=str(e))
    except SQLAlchemyError:
        logger.exception("Error creating saved cart")
        raise HTTPException(status_code=500, detail="Failed to create saved cart")


@router.delete("", response_model=MessageOut)
def delete_saved_cart(
    cart_id: int | None = Query(None, alias="id"),
    db: Session = Depends(get_db),
):
    if cart_id is None:
        raise HTTPException(status_code=400, detail="Cart ID is required")

    svc = get_service(db)
    try:
        svc.delete_cart(cart_id)
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    except SQLAlchemyError:
        logger.exception("Error deleting cart")
        raise HTTPException(status_code=500, detail="Failed to delete cart")

    return {"message": "Cart deleted successfully"}
