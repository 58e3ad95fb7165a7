def test_health(client):
    res = client.get("/health")
    assert res.status_code == 200
    assert res.json() == {"status": "ok"}


def test_openapi_lists_product_routes(client):
    paths = client.get("/openapi.json").json()["paths"]
    assert "/api/products/search" in paths
    assert "/api/products/search/next" in paths
    assert "/api/products/{product_id}" in paths
