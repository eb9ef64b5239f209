# tests/test_server.py

from __future__ import annotations

from .fakes import make_schema

CREDS = {"databaseId": "db-1", "apiKey": "secret"}


def test_health(client) -> None:
    assert client.get("/").json()["status"] == "healthy"
    assert client.get("/health").json()["notion_version"] == "2022-06-28"


def test_read_schema(client, gateway) -> None:
    gateway.schema = make_schema({"Name": "title", "Date": "date"})

    res = client.post("/api/notion/schema", json=CREDS)

    assert res.status_code == 200
    body = res.json()
    assert body["databaseId"] == "db-1"
    assert body["properties"]["Name"]["type"] == "title"
    assert gateway.schema_reads == [("db-1", "secret")]


def test_read_schema_requires_credentials(client, gateway) -> None:
    res = client.post("/api/notion/schema", json={"databaseId": "db-1"})

    assert res.status_code == 400
    assert res.json()["error"] is True
    assert gateway.schema_reads == []


def test_read_schema_failure_keeps_details(client, gateway) -> None:
    gateway.unreadable = True

    res = client.post("/api/notion/schema", json=CREDS)

    assert res.status_code == 500
    assert res.json() == {
        "error": True,
        "message": "❌ Unable to read the Notion database",
        "details": '{"code": "object_not_found"}',
    }


def test_send_generated_tasks(client, gateway) -> None:
    payload = {
        **CREDS,
        "schema": {"titlePropKey": "Name", "datePropKey": "Date"},
        "defaults": {"Priority": {"select": {"name": "High"}}},
        "tasks": [
            {"title": "Water plants — 01/01/2024", "dateISO": "2024-01-01"},
            {"title": "Water plants — 04/01/2024", "dateISO": "2024-01-04"},
        ],
    }

    res = client.post("/api/notion/tasks", json=payload)

    assert res.status_code == 200
    assert res.json() == {"success": True, "message": "✅ Tasks sent to Notion!", "created": 2}
    assert gateway.created[1] == {
        "Priority": {"select": {"name": "High"}},
        "Name": {"title": [{"text": {"content": "Water plants — 04/01/2024"}}]},
        "Date": {"date": {"start": "2024-01-04"}},
    }


def test_send_generated_tasks_missing_tasks(client, gateway) -> None:
    res = client.post("/api/notion/tasks", json={**CREDS, "schema": {"titlePropKey": "Name"}})

    assert res.status_code == 400
    assert gateway.schema_reads == []


def test_send_without_title_field_is_400(client, gateway) -> None:
    gateway.schema = make_schema({"Notes": "rich_text"})

    res = client.post("/api/notion/tasks", json={**CREDS, "tasks": [{"title": "x", "dateISO": "2024-01-01"}]})

    assert res.status_code == 400
    assert "Title" in res.json()["message"]
    assert gateway.create_calls == 0


def test_write_failure_stops_batch(client, gateway) -> None:
    gateway.fail_on = 1

    res = client.post("/api/notion", json={**CREDS, "tasks": ["A — 01/01/2024", "B — 02/01/2024"]})

    assert res.status_code == 500
    assert res.json()["message"] == "❌ Error sending to Notion"
    assert res.json()["details"] == '{"code": "validation_error"}'
    assert gateway.create_calls == 1


def test_send_text_tasks(client, gateway) -> None:
    res = client.post("/api/notion", json={**CREDS, "tasks": ["Clean — 31/02/2024"]})

    assert res.status_code == 200
    assert gateway.created == [
        {
            "Name": {"title": [{"text": {"content": "Clean"}}]},
            "Date": {"date": {"start": "2024-03-02"}},
        }
    ]


def test_send_text_tasks_missing_fields(client) -> None:
    res = client.post("/api/notion", json={"apiKey": "secret", "tasks": []})

    assert res.status_code == 400
    assert res.json()["message"] == "⚠️ API Key, Database ID or tasks missing."
