# storefront/data/seed.py
from decimal import Decimal

from storefront.data.database import SessionLocal
from storefront.data.models import CategoryModel, ProductModel
from storefront.utils.slug import slugify
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

DEMO_CATALOG = {
    "Skin Care": [
        ("Shea Butter Body Cream", "SKN-001", "8500.00", 25),
        ("Black Soap Cleanser", "SKN-002", "4500.00", 40),
    ],
    "Hair Care": [
        ("Chebe Hair Oil", "HAR-001", "12000.00", 15),
    ],
    "Fragrances": [
        ("Oud Body Mist", "FRG-001", "15500.00", 10),
    ],
}


def seed(session_factory=SessionLocal) -> int:
    """Insert the demo catalog into an empty database, returns products added."""
    db = session_factory()
    try:
        # not forcing: only seed if empty
        if db.query(CategoryModel).first():
            return 0

        added = 0
        for name, products in DEMO_CATALOG.items():
            category = CategoryModel(name=name, slug=slugify(name))
            db.add(category)
            for product_name, number, price, stock in products:
                category.products.append(
                    ProductModel(
                        name=product_name,
                        product_number=number,
                        price=Decimal(price),
                        stock=stock,
                        image_url=f"/images/products/{slugify(product_name)}.jpg",
                        is_active=True,
                    )
                )
                added += 1
        db.commit()

        logger.info(f"Seeded {len(DEMO_CATALOG)} categories and {added} products")
        return added
    finally:
        db.close()
