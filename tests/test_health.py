def test_health_check(client):
    response = client.get("/healthz")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_app_header(client):
    response = client.get("/healthz")
    assert response.headers["X-App"] == "openai-relay"
