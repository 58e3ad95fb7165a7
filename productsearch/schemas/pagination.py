from typing import Any, TypeVar, Generic
from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")

MAX_PAGE_SIZE = 200


class Page(BaseModel, Generic[T]):
    """One window of search results plus what it takes to fetch the next one.

    ``offset`` and ``limit`` are the coordinates the window was requested
    with; the last page of a walk may hold fewer than ``limit`` items. The
    empty page returned by :meth:`empty` ends a walk and carries no query.
    """

    model_config = ConfigDict(frozen=True)

    items: tuple[T, ...] = ()
    query: str | None = None
    offset: int | None = None
    limit: int | None = None
    total: int | None = None

    @classmethod
    def empty(cls) -> "Page[Any]":
        return _EMPTY

    @property
    def is_empty(self) -> bool:
        return not self.items


_EMPTY = Page()


class PageCursor(BaseModel):
    """Coordinates of a page a client holds, echoed back to request the next one."""

    query: str
    offset: int = Field(..., ge=0)
    limit: int = Field(..., ge=1, le=MAX_PAGE_SIZE)

    def to_page(self) -> Page:
        return Page(query=self.query, offset=self.offset, limit=self.limit)
