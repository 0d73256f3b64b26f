import uuid

from tasker.core.security import create_access_token


def create(client, headers, **payload):
    payload.setdefault("title", "Test Todo")
    response = client.post("/v1/todos", headers=headers, json=payload)
    assert response.status_code == 201
    return response.json()


# ========== AUTH ==========

def test_missing_token(client):
    response = client.get("/v1/todos")
    assert response.status_code == 401


def test_invalid_token(client):
    response = client.get("/v1/todos", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401


def test_health(client):
    assert client.get("/health/z").json() == {"status": "ok"}


# ========== CRUD ==========

def test_create_todo(client, auth_headers):
    data = create(client, auth_headers, title="Ma première tâche", priority="high", metadata={"tags": ["work"]})

    assert data["title"] == "Ma première tâche"
    assert data["priority"] == "high"
    assert data["status"] == "draft"
    assert data["completed_at"] is None
    assert data["metadata"]["tags"] == ["work"]
    assert str(uuid.UUID(data["id"])) == data["id"]


def test_create_todo_empty_title(client, auth_headers):
    response = client.post("/v1/todos", headers=auth_headers, json={"title": ""})
    assert response.status_code == 422


def test_get_todo_populated(client, auth_headers):
    parent = create(client, auth_headers, title="Parent")
    create(client, auth_headers, title="Child", parent_todo_id=parent["id"])
    client.post(f"/v1/todos/{parent['id']}/comments", headers=auth_headers, json={"content": "hello"})

    response = client.get(f"/v1/todos/{parent['id']}", headers=auth_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["category"] is None
    assert [c["title"] for c in data["children"]] == ["Child"]
    assert [c["content"] for c in data["comments"]] == ["hello"]


def test_get_todo_other_owner_is_404(client, auth_headers):
    todo = create(client, auth_headers)
    other = {"Authorization": f"Bearer {create_access_token(str(uuid.uuid4()))}"}

    assert client.get(f"/v1/todos/{todo['id']}", headers=other).status_code == 404
    assert client.patch(f"/v1/todos/{todo['id']}", headers=other, json={"title": "x"}).status_code == 404
    assert client.delete(f"/v1/todos/{todo['id']}", headers=other).status_code == 404


def test_update_todo(client, auth_headers):
    todo = create(client, auth_headers, title="Tâche originale", priority="low")

    response = client.patch(
        f"/v1/todos/{todo['id']}",
        headers=auth_headers,
        json={"title": "Tâche modifiée", "status": "completed"}
    )
    assert response.status_code == 200
    data = response.json()
    assert data["title"] == "Tâche modifiée"
    assert data["priority"] == "low"
    assert data["status"] == "completed"
    assert data["completed_at"] is not None


def test_update_todo_empty_payload_is_400(client, auth_headers):
    todo = create(client, auth_headers)

    response = client.patch(f"/v1/todos/{todo['id']}", headers=auth_headers, json={})
    assert response.status_code == 400
    assert response.json()["detail"] == "no fields to update"


def test_delete_todo(client, auth_headers):
    todo = create(client, auth_headers)

    assert client.delete(f"/v1/todos/{todo['id']}", headers=auth_headers).status_code == 204
    assert client.get(f"/v1/todos/{todo['id']}", headers=auth_headers).status_code == 404

    again = client.delete(f"/v1/todos/{todo['id']}", headers=auth_headers)
    assert again.status_code == 404
    assert again.json()["code"] == "TODO_NOT_FOUND"


# ========== LIST / STATS ==========

def test_list_todos_paginated(client, auth_headers):
    for i in range(3):
        create(client, auth_headers, title=f"Todo {i}", priority="high")

    response = client.get("/v1/todos?page=1&limit=2", headers=auth_headers)
    assert response.status_code == 200
    data = response.json()
    assert len(data["data"]) == 2
    assert data["page"] == 1
    assert data["limit"] == 2
    assert data["total"] == 3
    assert data["total_pages"] == 2


def test_list_todos_filters(client, auth_headers):
    create(client, auth_headers, title="Test write", priority="high")
    create(client, auth_headers, title="Read", priority="low")

    data = client.get("/v1/todos?priority=high", headers=auth_headers).json()
    assert [t["title"] for t in data["data"]] == ["Test write"]

    data = client.get("/v1/todos?search=test", headers=auth_headers).json()
    assert [t["title"] for t in data["data"]] == ["Test write"]


def test_list_todos_bad_sort_is_400(client, auth_headers):
    response = client.get("/v1/todos?sort=password", headers=auth_headers)
    assert response.status_code == 400


def test_list_todos_limit_out_of_range(client, auth_headers):
    assert client.get("/v1/todos?limit=0", headers=auth_headers).status_code == 422
    assert client.get("/v1/todos?limit=101", headers=auth_headers).status_code == 422


def test_stats(client, auth_headers):
    todo = create(client, auth_headers)
    create(client, auth_headers)
    client.patch(f"/v1/todos/{todo['id']}", headers=auth_headers, json={"status": "completed"})

    response = client.get("/v1/todos/stats", headers=auth_headers)
    assert response.status_code == 200
    assert response.json() == {
        "total": 2, "draft": 1, "active": 0, "completed": 1, "archived": 0, "overdue": 0
    }


def test_bulk_update(client, auth_headers):
    ids = [create(client, auth_headers, title=f"Todo {i}")["id"] for i in range(2)]

    response = client.patch("/v1/todos/bulk", headers=auth_headers, json={"todo_ids": ids, "priority": "high"})
    assert response.status_code == 200
    assert [t["priority"] for t in response.json()] == ["high", "high"]


# ========== COMMENTS / CATEGORIES ==========

def test_comments_on_missing_todo(client, auth_headers):
    response = client.post(f"/v1/todos/{uuid.uuid4()}/comments", headers=auth_headers, json={"content": "x"})
    assert response.status_code == 404


def test_list_comments(client, auth_headers):
    todo = create(client, auth_headers)
    for text in ["un", "deux"]:
        client.post(f"/v1/todos/{todo['id']}/comments", headers=auth_headers, json={"content": text})

    response = client.get(f"/v1/todos/{todo['id']}/comments", headers=auth_headers)
    assert [c["content"] for c in response.json()] == ["un", "deux"]


def test_categories(client, auth_headers):
    response = client.post("/v1/categories", headers=auth_headers, json={"name": "Work", "color": "#ff0000"})
    assert response.status_code == 201
    category = response.json()

    todo = create(client, auth_headers, category_id=category["id"])
    populated = client.get(f"/v1/todos/{todo['id']}", headers=auth_headers).json()
    assert populated["category"]["name"] == "Work"

    assert [c["name"] for c in client.get("/v1/categories", headers=auth_headers).json()] == ["Work"]
    assert client.get(f"/v1/categories/{category['id']}", headers=auth_headers).status_code == 200

    assert client.delete(f"/v1/categories/{category['id']}", headers=auth_headers).status_code == 204
    assert client.get(f"/v1/categories/{category['id']}", headers=auth_headers).status_code == 404

    populated = client.get(f"/v1/todos/{todo['id']}", headers=auth_headers).json()
    assert populated["category"] is None
    assert populated["category_id"] is None


def test_timestamps_serialized_with_zone(client, auth_headers):
    todo = create(client, auth_headers)

    for field in ("created_at", "updated_at"):
        assert todo[field].endswith(("Z", "+00:00"))
