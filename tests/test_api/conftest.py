import pytest
from fastapi.testclient import TestClient
from productsearch.main import app
from productsearch.dependencies import get_product_service


@pytest.fixture(scope="function")
def client(service):
    app.dependency_overrides[get_product_service] = lambda: service

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
def seed(service, make_products):
    def _seed(count: int):
        return service.save_all(make_products(count))
    return _seed
