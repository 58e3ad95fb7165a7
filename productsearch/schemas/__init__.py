from productsearch.schemas.product import Product, BulkSaveRequest
from productsearch.schemas.pagination import Page, PageCursor

__all__ = [
    "Product", "BulkSaveRequest",
    "Page", "PageCursor",
]
