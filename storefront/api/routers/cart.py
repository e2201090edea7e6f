# storefront/api/routers/cart.py
from fastapi import APIRouter, Cookie, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.api.deps import get_cart_session, get_cart_storage
from storefront.data.database import get_db
from storefront.domain.errors import StorefrontError
from storefront.domain.schemas import (
    CartCountOut,
    CartItemAddIn,
    CartLoadIn,
    CartQuantityIn,
    CartSaveIn,
    CartStateOut,
    SavedCartOut,
)
from storefront.services.cart_storage import CartStorage
from storefront.services.guest_cart_service import GuestCartService
from storefront.services.saved_cart_service import SavedCartService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/cart", tags=["cart"])


def get_service(db: Session, storage: CartStorage):
    return GuestCartService(db=db, storage=storage)


@router.get("/count", response_model=CartCountOut)
def cart_count(
    guest_id: str | None = Cookie(None, alias="guestId"),
    db: Session = Depends(get_db),
):
    """Item count of the saved cart whose code is in the guestId cookie, 0 otherwise."""
    if not guest_id:
        return {"count": 0}

    try:
        return {"count": SavedCartService(db).count_items(guest_id)}
    except SQLAlchemyError:
        logger.exception("Cart count error")
        return {"count": 0}


@router.get("", response_model=CartStateOut)
def get_cart(
    session_key: str = Depends(get_cart_session),
    storage: CartStorage = Depends(get_cart_storage),
    db: Session = Depends(get_db),
):
    return get_service(db, storage).get_cart(session_key)


@router.delete("", response_model=CartStateOut)
def clear_cart(
    session_key: str = Depends(get_cart_session),
    storage: CartStorage = Depends(get_cart_storage),
    db: Session = Depends(get_db),
):
    return get_service(db, storage).clear(session_key)


@router.post("/items", response_model=CartStateOut)
def add_item(
    payload: CartItemAddIn,
    session_key: str = Depends(get_cart_session),
    storage: CartStorage = Depends(get_cart_storage),
    db: Session = Depends(get_db),
):
    svc = get_service(db, storage)
    try:
        return svc.add_product(session_key, payload.product_id)
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.put("/items/{line_id}", response_model=CartStateOut)
def update_item(
    line_id: str,
    payload: CartQuantityIn,
    session_key: str = Depends(get_cart_session),
    storage: CartStorage = Depends(get_cart_storage),
    db: Session = Depends(get_db),
):
    svc = get_service(db, storage)
    try:
        return svc.update_quantity(session_key, line_id, payload.quantity)
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.delete("/items/{line_id}", response_model=CartStateOut)
def remove_item(
    line_id: str,
    session_key: str = Depends(get_cart_session),
    storage: CartStorage = Depends(get_cart_storage),
    db: Session = Depends(get_db),
):
    svc = get_service(db, storage)
    try:
        return svc.remove_item(session_key, line_id)
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.post("/save", response_model=SavedCartOut, status_code=201)
def save_cart(
    payload: CartSaveIn,
    session_key: str = Depends(get_cart_session),
    storage: CartStorage = Depends(get_cart_storage),
    db: Session = Depends(get_db),
):
    svc = get_service(db, storage)
    try:
        return svc.save(session_key, payload.email)
    except StorefrontError as e:
        if e.status_code >= 500:
            logger.exception("Error saving cart")
            raise HTTPException(status_code=500, detail="Failed to save cart")
        raise HTTPException(status_code=e.status_code, detail=str(e))
    except SQLAlchemyError:
        logger.exception("Error saving cart")
        raise HTTPException(status_code=500, detail="Failed to save cart")


@router.post("/load", response_model=CartStateOut)
def load_cart(
    payload: CartLoadIn,
    session_key: str = Depends(get_cart_session),
    storage: CartStorage = Depends(get_cart_storage),
    db: Session = Depends(get_db),
):
    svc = get_service(db, storage)
    try:
        return svc.load(session_key, payload.cart_code)
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    except SQLAlchemyError:
        logger.exception("Error loading saved cart")
        raise HTTPException(status_code=500, detail="Failed to load cart")
