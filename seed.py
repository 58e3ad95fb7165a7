"""Seed script: index the demo product catalogue."""
import os
import sys

# Ensure we're in the project root
sys.path.insert(0, os.path.dirname(__file__))

from productsearch.config import settings
from productsearch.database import Base, engine
from productsearch.dependencies import get_backend, get_product_service
from productsearch.schemas.product import Product


def create_products(count: int) -> list[Product]:
    return [
        Product(
            id=str(i),
            name=f"Name of {i} product",
            description=f"Description of {i} product",
            price=round(i * 1.2, 2),
            stock_available=i * 10,
        )
        for i in range(count)
    ]


def seed(count: int = 21):
    if settings.SEARCH_BACKEND == "sql":
        os.makedirs("data", exist_ok=True)
        Base.metadata.create_all(bind=engine)

    svc = get_product_service(get_backend())
    svc.save_all(create_products(count))

    # Walk the whole index once so a broken setup shows up here, not in the API
    page = svc.search("name")
    seen = 0
    while not page.is_empty:
        seen += len(page.items)
        page = svc.next(page)
    print(f"Seeded {count} products into '{settings.SEARCH_INDEX}', {seen} searchable.")


if __name__ == "__main__":
    seed(int(sys.argv[1]) if len(sys.argv) > 1 else 21)
