import database


def test_root(client):
    assert client.get("/").json() == {"message": "CloudMaSa API is running"}


def test_health_reports_connected_database(client, mongo):
    mongo["contacts"].insert_one({"name": "x"})

    body = client.get("/health").json()

    assert body["database"] == "connected"
    assert body["database_name"] == "forms_test"
    assert "contacts" in body["collections"]


def test_health_never_raises(client, monkeypatch):
    def down():
        raise RuntimeError("server selection timeout")

    monkeypatch.setattr(database, "ensure_connected", down)

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["database"].startswith("error:")
