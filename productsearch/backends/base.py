from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol


@dataclass(frozen=True)
class SearchResult:
    total_hits: int
    items: list[dict[str, Any]] = field(default_factory=list)


@dataclass(frozen=True)
class BulkItemResult:
    position: int  # index of the submitted document this result answers
    assigned_id: str


class SearchBackend(Protocol):
    """Document store the paging layer retrieves from.

    Documents are plain dicts. Every document a backend returns carries its
    backend id under the ``"id"`` key. Failures to reach the store are
    raised as :class:`~productsearch.errors.BackendUnavailable`.
    """

    def get_by_id(self, index: str, doc_id: str) -> dict[str, Any] | None: ...

    def search(
        self,
        index: str,
        text: str,
        fields: Sequence[str],
        offset: int,
        limit: int,
    ) -> SearchResult: ...

    def bulk_upsert(self, index: str, documents: Sequence[dict[str, Any]]) -> list[BulkItemResult]: ...
