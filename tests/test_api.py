import os
import time

import pytest
from fastapi.testclient import TestClient

from docdrop.main import create_app


@pytest.fixture
def client(make_settings):
    with TestClient(create_app(make_settings(MAX_DOC_COUNT=3))) as c:
        yield c


def test_status(client):
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["document_count"] == 0
    assert data["max_document_count"] == 3


def test_upload_and_download(client):
    response = client.post("/", content=b"\x00binary\xffpayload")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    name = response.text
    assert len(name) == 9
    assert not name.endswith("\n")

    response = client.get(f"/{name}")
    assert response.status_code == 200
    assert response.content == b"\x00binary\xffpayload"
    assert response.headers["content-type"] == "application/octet-stream"


def test_name_headers_are_honoured(client):
    response = client.post(
        "/",
        content=b"x",
        headers={"Doc-Name-Charset": "xy", "Doc-Name-Length": "5"},
    )
    assert response.status_code == 200
    assert len(response.text) == 5
    assert set(response.text) <= {"x", "y"}


@pytest.mark.parametrize("headers", [
    {"Doc-Lifetime": "forever"},
    {"Doc-Lifetime": "-1h"},
    {"Doc-Name-Length": "nine"},
    {"Doc-Name-Length": "0"},
    {"Doc-Name-Length": "1_0"},
    {"Doc-Name-Charset": "a/b"},
])
def test_bad_headers_are_rejected(client, headers, docs_root):
    response = client.post("/", content=b"x", headers=headers)
    assert response.status_code == 400
    assert os.listdir(docs_root) == []


def test_empty_body_is_rejected(client, docs_root):
    response = client.post("/", content=b"")
    assert response.status_code == 400
    assert os.listdir(docs_root) == []


def test_unknown_document(client):
    assert client.get("/doesnotexist").status_code == 404


def test_capacity_exceeded(client):
    for i in range(3):
        assert client.post("/", content=b"x").status_code == 200
    response = client.post("/", content=b"x")
    assert response.status_code == 507
    assert client.get("/").json()["document_count"] == 3


def test_name_space_exhausted(client):
    headers = {"Doc-Name-Charset": "a", "Doc-Name-Length": "1"}
    assert client.post("/", content=b"x", headers=headers).status_code == 200
    assert client.post("/", content=b"x", headers=headers).status_code == 507


def test_document_expires(client):
    name = client.post("/", content=b"brief", headers={"Doc-Lifetime": "300ms"}).text
    assert client.get(f"/{name}").status_code == 200
    time.sleep(0.6)
    assert client.get(f"/{name}").status_code == 404
    assert client.get("/").json()["document_count"] == 0


def test_restart_uses_default_lifetime(make_settings):
    with TestClient(create_app(make_settings())) as c:
        name = c.post("/", content=b"keep", headers={"Doc-Lifetime": "1h"}).text

    with TestClient(create_app(make_settings(DEFAULT_LIFETIME=0.3))) as c:
        assert c.get("/").json()["document_count"] == 1
        assert c.get(f"/{name}").content == b"keep"
        time.sleep(0.6)
        assert c.get(f"/{name}").status_code == 404
