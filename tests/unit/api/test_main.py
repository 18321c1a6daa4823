"""HTTP dispatch boundary tests."""

import pytest
from fastapi.testclient import TestClient

from sqlbridge.api.main import app


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


def invoke(client, command, **body):
    return client.post(f"/invoke/{command}", json=body)


def test_full_flow(client, db_path):
    assert invoke(client, "open", dbPath=db_path, options={}).json() == {"ok": True, "result": True}
    invoke(client, "execute", dbPath=db_path, query="CREATE TABLE t(id INTEGER, name TEXT)")
    invoke(
        client,
        "execute",
        dbPath=db_path,
        query="INSERT INTO t VALUES (?1, ?2)",
        params=[[1, "Bob"], [2, "Ann"]],
    )
    resp = invoke(client, "select", path=db_path, sql="SELECT * FROM t WHERE id = ?1", params=[1])
    assert resp.status_code == 200
    assert resp.json() == {"ok": True, "result": [{"id": 1, "name": "Bob"}]}


def test_not_connected_is_serialized_as_string(client, db_path):
    resp = invoke(client, "select", path=db_path, query="SELECT 1")
    assert resp.status_code == 400
    body = resp.json()
    assert body["ok"] is False
    assert body["kind"] == "NotConnected"
    assert body["error"] == f"Not connected to {db_path}"


def test_batch_failure(client, db_path):
    invoke(client, "open", path=db_path)
    invoke(client, "execute", path=db_path, query="CREATE TABLE t(id INTEGER)")
    resp = invoke(
        client,
        "batch",
        path=db_path,
        queries=[["INSERT INTO t VALUES (1)", []], ["INSERT INTO nope VALUES (1)", []]],
    )
    assert resp.status_code == 400
    assert resp.json()["kind"] == "BatchFailed"
    count = invoke(client, "select_first", path=db_path, query="SELECT COUNT(*) AS n FROM t")
    assert count.json()["result"] == {"n": 0}


def test_blob_rendered_as_byte_list(client, db_path):
    invoke(client, "open", path=db_path)
    resp = invoke(client, "select", path=db_path, query="SELECT X'00FF' AS b")
    assert resp.json()["result"] == [{"b": [0, 255]}]


def test_set_pragma(client, db_path):
    invoke(client, "open", path=db_path)
    resp = invoke(client, "set_pragma", path=db_path, key="foreign_keys", value=1)
    assert resp.json() == {"ok": True, "result": True}


def test_load_returns_path(client, data_dir):
    resp = invoke(client, "load", options={"disable_foreign_keys": True})
    assert resp.json()["result"] == str(data_dir / "sqlbridge.db")
    health = client.get("/health").json()
    assert str(data_dir / "sqlbridge.db") in health["open"]


def test_unknown_command(client):
    assert invoke(client, "drop_everything").status_code == 404


def test_missing_argument(client):
    assert invoke(client, "select", query="SELECT 1").status_code == 422


def test_invalid_options(client, db_path):
    resp = invoke(client, "open", path=db_path, options={"disable_foreign_keys": "yes"})
    assert resp.status_code == 400
    assert resp.json()["kind"] == "ValueError"
