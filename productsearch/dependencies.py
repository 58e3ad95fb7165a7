from functools import lru_cache
from fastapi import Depends
from productsearch.backends import SearchBackend, create_backend
from productsearch.config import settings
from productsearch.schemas.product import Product
from productsearch.services.search_service import PagingSearchService


@lru_cache
def get_backend() -> SearchBackend:
    return create_backend(settings)


def get_product_service(backend: SearchBackend = Depends(get_backend)) -> PagingSearchService[Product]:
    return PagingSearchService(
        backend,
        index=settings.SEARCH_INDEX,
        document_type=Product,
        fields=settings.SEARCH_FIELDS,
        page_size=settings.PAGE_SIZE,
    )
