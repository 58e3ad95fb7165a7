from productsearch.models.document import Document

__all__ = ["Document"]
