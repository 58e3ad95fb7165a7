from productsearch.backends.base import SearchBackend, SearchResult, BulkItemResult
from productsearch.backends.sql import SqlSearchBackend


def create_backend(settings) -> SearchBackend:
    """Return the backend selected by ``settings.SEARCH_BACKEND``."""
    if settings.SEARCH_BACKEND == "sql":
        from productsearch.database import SessionLocal
        return SqlSearchBackend(SessionLocal)
    if settings.SEARCH_BACKEND == "elasticsearch":
        from productsearch.backends.elastic import ElasticsearchBackend, create_client
        return ElasticsearchBackend(create_client(settings), refresh=settings.ELASTICSEARCH_REFRESH)
    raise ValueError(f"Unknown SEARCH_BACKEND: {settings.SEARCH_BACKEND!r}")


__all__ = [
    "SearchBackend", "SearchResult", "BulkItemResult",
    "SqlSearchBackend", "create_backend",
]
