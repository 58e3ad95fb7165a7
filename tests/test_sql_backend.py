"""Tests for the SQL-backed search backend."""
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from productsearch.backends.sql import SqlSearchBackend
from productsearch.errors import BackendUnavailable
from productsearch.models.document import Document

FIELDS = ("name", "description")


def _docs(n):
    return [{"id": str(i), "name": f"Name of {i} product", "description": f"Description of {i} product"}
            for i in range(n)]


def test_bulk_upsert_reports_positions(backend):
    results = backend.bulk_upsert("idx", [{"id": "a", "name": "A"}, {"name": "B"}, {"id": "c", "name": "C"}])

    assert [r.position for r in results] == [0, 1, 2]
    assert results[0].assigned_id == "a"
    assert results[2].assigned_id == "c"
    assert results[1].assigned_id  # generated


def test_generated_ids_are_unique(backend):
    results = backend.bulk_upsert("idx", [{"name": "same"}, {"name": "same"}])
    assert results[0].assigned_id != results[1].assigned_id


def test_upsert_replaces_in_place(backend, db):
    backend.bulk_upsert("idx", [{"id": "1", "name": "old"}, {"id": "2", "name": "other"}])
    backend.bulk_upsert("idx", [{"id": "1", "name": "new"}])

    assert backend.get_by_id("idx", "1")["name"] == "new"
    assert db.query(Document).count() == 2
    # Row position (rank order) survives the update
    page = backend.search("idx", "new other", FIELDS, 0, 10)
    assert [d["id"] for d in page.items] == ["1", "2"]


def test_duplicate_ids_within_batch(backend, db):
    backend.bulk_upsert("idx", [{"id": "1", "name": "first"}, {"id": "1", "name": "second"}])
    assert db.query(Document).count() == 1
    assert backend.get_by_id("idx", "1")["name"] == "second"


def test_get_by_id_missing(backend):
    assert backend.get_by_id("idx", "missing") is None


def test_get_by_id_adds_id(backend):
    results = backend.bulk_upsert("idx", [{"name": "no id"}])
    doc = backend.get_by_id("idx", results[0].assigned_id)
    assert doc == {"name": "no id", "id": results[0].assigned_id}


def test_indexes_are_isolated(backend):
    backend.bulk_upsert("a", [{"id": "1", "name": "apple"}])
    backend.bulk_upsert("b", [{"id": "1", "name": "banana"}])

    assert backend.get_by_id("a", "1")["name"] == "apple"
    assert backend.search("a", "banana", FIELDS, 0, 10).total_hits == 0


def test_search_windows(backend):
    backend.bulk_upsert("idx", _docs(21))

    first = backend.search("idx", "name", FIELDS, 0, 10)
    last = backend.search("idx", "name", FIELDS, 20, 10)
    beyond = backend.search("idx", "name", FIELDS, 30, 10)

    assert first.total_hits == 21
    assert [d["id"] for d in first.items] == [str(i) for i in range(10)]
    assert [d["id"] for d in last.items] == ["20"]
    assert beyond.total_hits == 21
    assert beyond.items == []


def test_search_is_case_insensitive(backend):
    backend.bulk_upsert("idx", [{"id": "1", "name": "Guinness Book of Records"}])
    assert backend.search("idx", "BOOK", FIELDS, 0, 10).total_hits == 1


def test_search_matches_any_term_in_any_field(backend):
    backend.bulk_upsert("idx", [
        {"id": "1", "name": "red chair", "description": "wooden"},
        {"id": "2", "name": "blue table", "description": "steel"},
        {"id": "3", "name": "lamp", "description": "glass"},
    ])
    result = backend.search("idx", "chair steel", FIELDS, 0, 10)
    assert [d["id"] for d in result.items] == ["1", "2"]


def test_search_only_looks_at_requested_fields(backend):
    backend.bulk_upsert("idx", [{"id": "1", "name": "chair", "description": "oak"}])
    assert backend.search("idx", "oak", ("name",), 0, 10).total_hits == 0
    assert backend.search("idx", "oak", ("description",), 0, 10).total_hits == 1


def test_search_escapes_wildcards(backend):
    backend.bulk_upsert("idx", [{"id": "1", "name": "plain"}, {"id": "2", "name": "100% cotton"}])
    assert [d["id"] for d in backend.search("idx", "%", FIELDS, 0, 10).items] == ["2"]
    assert backend.search("idx", "_", FIELDS, 0, 10).total_hits == 0


@pytest.mark.parametrize("text", ["", "   "])
def test_blank_query_matches_nothing(backend, text):
    backend.bulk_upsert("idx", _docs(3))
    result = backend.search("idx", text, FIELDS, 0, 10)
    assert result.total_hits == 0
    assert result.items == []


def test_unreachable_database_raises_backend_unavailable(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path}/missing/dir/db.sqlite")
    backend = SqlSearchBackend(sessionmaker(bind=engine))

    with pytest.raises(BackendUnavailable):
        backend.get_by_id("idx", "1")
