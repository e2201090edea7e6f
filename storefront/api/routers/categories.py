# storefront/api/routers/categories.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.errors import StorefrontError
from storefront.domain.schemas import (
    CategoryCreate,
    CategoryUpdate,
    CategoryOut,
    CategoryWithCountOut,
    MessageOut,
)
from storefront.services.category_service import CategoryService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/admin/categories", tags=["admin: categories"])


def get_service(db: Session):
    return CategoryService(db)


@router.get("", response_model=List[CategoryWithCountOut])
def list_categories(db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.list_categories()
    except SQLAlchemyError:
        logger.exception("Error fetching categories")
        raise HTTPException(status_code=500, detail="Failed to fetch categories")


@router.post("", response_model=CategoryOut, status_code=201)
def create_category(payload: CategoryCreate, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.create_category(payload)
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    except SQLAlchemyError:
        logger.exception("Error creating category")
        raise HTTPException(status_code=500, detail="Failed to create category")


@router.put("", response_model=CategoryOut)
def update_category(payload: CategoryUpdate, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.update_category(payload)
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    except SQLAlchemyError:
        logger.exception("Error updating category")
        raise HTTPException(status_code=500, detail="Failed to update category")


@router.delete("", response_model=MessageOut)
def delete_category(
    category_id: int | None = Query(None, alias="id"),
    db: Session = Depends(get_db),
):
    if category_id is None:
        raise HTTPException(status_code=400, detail="Category ID is required")

    svc = get_service(db)
    try:
        svc.delete_category(category_id)
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    except SQLAlchemyError:
        logger.exception("Error deleting category")
        raise HTTPException(status_code=500, detail="Failed to delete category")

    return {"message": "Category deleted successfully"}
