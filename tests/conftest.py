"""Shared pytest fixtures: in-memory database, API client, catalog rows."""

import os

# must be set before storefront is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "1"

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

import storefront.data.models  # noqa: F401
from storefront.api import create_app
from storefront.api.deps import get_cart_storage
from storefront.data.database import Base, SessionLocal, engine
from storefront.data.models import CategoryModel, ProductModel
from storefront.services.cart_storage import InMemoryCartStorage


@pytest.fixture(autouse=True)
def tables():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def cart_storage():
    return InMemoryCartStorage()


@pytest.fixture
def client(cart_storage):
    app = create_app()
    app.dependency_overrides[get_cart_storage] = lambda: cart_storage
    with TestClient(app) as c:
        yield c


@pytest.fixture
def category(db):
    """Create a category with no products."""
    category = CategoryModel(name="Skin Care", slug="skin-care")
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


@pytest.fixture
def make_product(db, category):
    """Factory for products in the default category."""

    def _make(number="PRD-001", price="5000.00", stock=10, name=None, is_active=True):
        product = ProductModel(
            name=name or f"Product {number}",
            product_number=number,
            price=Decimal(price),
            stock=stock,
            category_id=category.id,
            image_url=f"/images/{number.lower()}.jpg",
            is_active=is_active,
        )
        db.add(product)
        db.commit()
        db.refresh(product)
        return product

    return _make


@pytest.fixture
def product(make_product):
    return make_product()
