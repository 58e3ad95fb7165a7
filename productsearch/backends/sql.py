import logging
import uuid
from collections.abc import Sequence
from contextlib import contextmanager
from typing import Any, Iterator
from sqlalchemy import select, func, or_
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, sessionmaker
from productsearch.backends.base import SearchResult, BulkItemResult
from productsearch.errors import BackendUnavailable
from productsearch.models.document import Document

logger = logging.getLogger(__name__)


class SqlSearchBackend:
    """Search backend storing documents as JSON rows in a relational database.

    A document matches when any whitespace-separated term of the query occurs
    (case-insensitively) in any of the searched fields. Results come back in
    insertion order; there is no scoring.
    """

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    @contextmanager
    def _session(self) -> Iterator[Session]:
        try:
            with self._session_factory() as db:
                yield db
        except OperationalError as e:
            logger.error("Database backend unavailable: %s", e)
            raise BackendUnavailable(f"Database backend unavailable: {e}") from e

    def get_by_id(self, index: str, doc_id: str) -> dict[str, Any] | None:
        with self._session() as db:
            doc = db.scalar(_by_id(index, doc_id))
            return doc.to_dict() if doc else None

    def search(
        self,
        index: str,
        text: str,
        fields: Sequence[str],
        offset: int,
        limit: int,
    ) -> SearchResult:
        terms = text.split()
        if not terms or not fields:
            return SearchResult(total_hits=0)

        matches = [
            Document.source[f].as_string().icontains(term, autoescape=True)
            for f in fields
            for term in terms
        ]
        query = select(Document).where(Document.index_name == index, or_(*matches))

        with self._session() as db:
            total = db.scalar(select(func.count()).select_from(query.subquery()))
            docs = db.scalars(query.order_by(Document.id).offset(offset).limit(limit)).all()
            return SearchResult(total_hits=total, items=[d.to_dict() for d in docs])

    def bulk_upsert(self, index: str, documents: Sequence[dict[str, Any]]) -> list[BulkItemResult]:
        results = []
        with self._session() as db:
            for position, source in enumerate(documents):
                doc_id = source.get("id") or uuid.uuid4().hex
                existing = db.scalar(_by_id(index, doc_id))
                if existing:
                    existing.source = dict(source)
                else:
                    db.add(Document(index_name=index, doc_id=doc_id, source=dict(source)))
                # Flush so a later document with the same id in this batch updates this row
                db.flush()
                results.append(BulkItemResult(position=position, assigned_id=doc_id))
            db.commit()
        logger.debug("Upserted %d documents into %s", len(results), index)
        return results


def _by_id(index: str, doc_id: str):
    return select(Document).where(Document.index_name == index, Document.doc_id == doc_id)
