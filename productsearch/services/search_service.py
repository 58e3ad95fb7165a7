import logging
from collections.abc import Sequence
from typing import Any, Generic, TypeVar
from pydantic import BaseModel
from productsearch.backends.base import SearchBackend
from productsearch.errors import InvalidState, BulkSaveError
from productsearch.schemas.pagination import Page

logger = logging.getLogger(__name__)

DEFAULT_FIELDS = ("name", "description")
DEFAULT_PAGE_SIZE = 10

T = TypeVar("T", bound=BaseModel)


class PagingSearchService(Generic[T]):
    """Document CRUD and forward-only paged search over one index.

    ``document_type`` is the pydantic model documents are read into; it
    must have an ``id`` field, which ``save`` and ``save_all`` fill in.
    Backend failures propagate to the caller unchanged.
    """

    def __init__(
        self,
        backend: SearchBackend,
        index: str,
        document_type: type[T],
        fields: Sequence[str] = DEFAULT_FIELDS,
        page_size: int = DEFAULT_PAGE_SIZE,
    ):
        if page_size < 1:
            raise ValueError(f"page_size must be at least 1, got {page_size}")
        self.backend = backend
        self.index = index
        self.document_type = document_type
        self.fields = tuple(fields)
        self.page_size = page_size

    def find_by_id(self, doc_id: str) -> T | None:
        doc = self.backend.get_by_id(self.index, doc_id)
        if doc is None:
            return None
        if doc.get("id") is None:
            doc = {**doc, "id": doc_id}
        return self.document_type.model_validate(doc)

    def search(self, query: str, limit: int | None = None) -> Page[T]:
        if limit is None:
            limit = self.page_size
        elif limit < 1:
            raise ValueError(f"limit must be at least 1, got {limit}")
        return self._fetch(query, 0, limit)

    def next(self, page: Page[T]) -> Page[T]:
        """Fetch the window following ``page``, with the same size."""
        if page.query is None or page.offset is None or page.limit is None:
            raise InvalidState("Cannot advance past an empty page")
        if page.offset < 0 or page.limit < 1:
            raise ValueError(f"Invalid page window (offset={page.offset}, limit={page.limit})")
        return self._fetch(page.query, page.offset + page.limit, page.limit)

    def _fetch(self, query: str, offset: int, limit: int) -> Page[T]:
        logger.debug("Searching %s for %r (offset=%d, limit=%d)", self.index, query, offset, limit)
        result = self.backend.search(self.index, query, self.fields, offset, limit)
        if result.total_hits == 0 or not result.items:
            return Page.empty()
        return Page(
            items=tuple(self.document_type.model_validate(doc) for doc in result.items),
            query=query,
            offset=offset,
            limit=limit,
            total=result.total_hits,
        )

    def save(self, item: T) -> T:
        self.save_all([item])
        return item

    def save_all(self, items: Sequence[T]) -> list[T]:
        """Upsert ``items`` in one batch and assign each its backend id."""
        items = list(items)
        if not items:
            return items

        documents: list[dict[str, Any]] = [item.model_dump(exclude_none=True) for item in items]
        results = self.backend.bulk_upsert(self.index, documents)

        assigned: dict[int, str] = {}
        for result in results:
            if result.position in assigned or not 0 <= result.position < len(items):
                raise BulkSaveError(
                    f"Backend answered position {result.position} of a {len(items)}-document batch unexpectedly",
                    positions=[result.position],
                )
            assigned[result.position] = result.assigned_id

        missing = [i for i in range(len(items)) if i not in assigned]
        if missing:
            raise BulkSaveError(f"Backend did not answer {len(missing)} document(s)", positions=missing)

        for position, item in enumerate(items):
            item.id = assigned[position]
        logger.info("Saved %d document(s) to %s", len(items), self.index)
        return items
