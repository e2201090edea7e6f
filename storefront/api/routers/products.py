# storefront/api/routers/products.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.errors import StorefrontError
from storefront.domain.schemas import ProductCreate, ProductUpdate, ProductOut, MessageOut
from storefront.services.product_service import ProductService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/admin/products", tags=["admin: products"])


def get_service(db: Session):
    return ProductService(db)


@router.get("", response_model=List[ProductOut])
def list_products(
    category_id: int | None = Query(None, alias="categoryId"),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.list_products(category_id=category_id)
    except SQLAlchemyError:
        logger.exception("Error fetching products")
        raise HTTPException(status_code=500, detail="Failed to fetch products")


@router.post("", response_model=ProductOut, status_code=201)
def create_product(payload: ProductCreate, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.create_product(payload)
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    except SQLAlchemyError:
        logger.exception("Error creating product")
        raise HTTPException(status_code=500, detail="Failed to create product")


@router.put("", response_model=ProductOut)
def update_product(payload: ProductUpdate, db: Session = Depends(get_db)):
    """Partial update, also used by the activate/deactivate toggle."""
    svc = get_service(db)
    try:
        return svc.update_product(payload)
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    except SQLAlchemyError:
        logger.exception("Error updating product")
        raise HTTPException(status_code=500, detail="Failed to update product")


@router.delete("", response_model=MessageOut)
def delete_product(
    product_id: int | None = Query(None, alias="id"),
    db: Session = Depends(get_db),
):
    if product_id is None:
        raise HTTPException(status_code=400, detail="Product ID is required")

    svc = get_service(db)
    try:
        svc.delete_product(product_id)
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    except SQLAlchemyError:
        logger.exception("Error deleting product")
        raise HTTPException(status_code=500, detail="Failed to delete product")

    return {"message": "Product deleted successfully"}
