import os

# Keep the app's own engine off disk; tests build their own engines below
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["SEARCH_BACKEND"] = "sql"

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from productsearch.database import Base
from productsearch.backends.sql import SqlSearchBackend
from productsearch.schemas.product import Product
from productsearch.services.search_service import PagingSearchService


TEST_DB_URL = "sqlite:///:memory:"
TEST_INDEX = "my_index"


@pytest.fixture(scope="function")
def engine():
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,  # Ensure all sessions share same in-memory DB
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db(engine):
    session = sessionmaker(bind=engine)()
    yield session
    session.close()


@pytest.fixture(scope="function")
def backend(engine):
    return SqlSearchBackend(sessionmaker(bind=engine))


@pytest.fixture(scope="function")
def service(backend):
    return PagingSearchService(backend, index=TEST_INDEX, document_type=Product)


@pytest.fixture
def make_products():
    def _make(count: int) -> list[Product]:
        return [
            Product(
                id=str(i),
                name=f"Name of {i} product",
                description=f"Description of {i} product",
                price=i * 1.2,
                stock_available=i * 10,
            )
            for i in range(count)
        ]
    return _make
