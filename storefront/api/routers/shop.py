# storefront/api/routers/shop.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.errors import StorefrontError
from storefront.domain.schemas import CategoryWithCountOut, CheckoutIn, OrderOut, ProductOut
from storefront.services.category_service import CategoryService
from storefront.services.order_service import OrderService
from storefront.services.product_service import ProductService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["shop"])


@router.get("/categories", response_model=List[CategoryWithCountOut])
def shop_categories(db: Session = Depends(get_db)):
    try:
        return CategoryService(db).list_categories()
    except SQLAlchemyError:
        logger.exception("Error fetching categories")
        raise HTTPException(status_code=500, detail="Failed to fetch categories")


@router.get("/products", response_model=List[ProductOut])
def shop_products(
    category: str | None = Query(None, description="category slug"),
    db: Session = Depends(get_db),
):
    try:
        return ProductService(db).list_active_products(category_slug=category)
    except SQLAlchemyError:
        logger.exception("Error fetching products")
        raise HTTPException(status_code=500, detail="Failed to fetch products")


@router.get("/products/{product_id}", response_model=ProductOut)
def shop_product(product_id: int, db: Session = Depends(get_db)):
    try:
        return ProductService(db).get_active_product(product_id)
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.post("/checkout", response_model=OrderOut, status_code=201)
def checkout(payload: CheckoutIn, db: Session = Depends(get_db)):
    """
    Checkout stub: records the order, no payment is taken.
    """
    try:
        return OrderService(db).checkout(payload)
    except StorefrontError as e:
        if e.status_code >= 500:
            logger.exception("Error creating order")
            raise HTTPException(status_code=500, detail="Failed to create order")
        raise HTTPException(status_code=e.status_code, detail=str(e))
    except SQLAlchemyError:
        logger.exception("Error creating order")
        raise HTTPException(status_code=500, detail="Failed to create order")
