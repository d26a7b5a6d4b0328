"""API tests for boards, starter boards, health and authentication."""

from fastapi.testclient import TestClient

from app.infra.supabase.client import get_repositories
from app.main import app

from helpers import OTHER_USER_ID, USER_ID


def create_board(client, **body):
    body.setdefault("name", "Weeknight dinners")
    response = client.post("/api/boards", json=body)
    assert response.status_code == 200, response.text
    return response.json()["board"]


class TestBoards:

    def test_create_board_with_default_sections(self, client):
        board = create_board(client)

        assert board["user_id"] == USER_ID
        assert board["board_type"] == "kanban"
        assert board["template_type"] == "kanban"
        assert board["color"] == "#9333ea"
        assert board["display_order"] == 0

        sections = client.get(f"/api/boards/{board['id']}/sections").json()["sections"]
        assert [(s["name"], s["display_order"]) for s in sections] == [
            ("To Do", 0), ("In Progress", 1), ("Done", 2),
        ]

    def test_template_type_is_inferred_from_board_type(self, client):
        assert create_board(client, board_type="list")["template_type"] == "markdown"
        assert create_board(client, board_type="job_tracker")["template_type"] == "job_tracker"
        assert create_board(client, board_type="list", template_type="grocery")["template_type"] == "grocery"

    def test_new_boards_go_last(self, client):
        orders = [create_board(client, name=f"Board {i}")["display_order"] for i in range(3)]
        assert orders == [0, 1, 2]

    def test_list_only_shows_own_boards(self, client, supabase):
        create_board(client)
        supabase.table("task_boards").insert({"user_id": OTHER_USER_ID, "name": "Not mine"}).execute()

        body = client.get("/api/boards").json()

        assert body["count"] == 1
        assert body["boards"][0]["name"] == "Weeknight dinners"

    def test_other_users_board_is_not_found(self, client, supabase):
        row = supabase.table("task_boards").insert({"user_id": OTHER_USER_ID, "name": "Not mine"}).execute().data[0]

        assert client.get(f"/api/boards/{row['id']}").status_code == 404
        assert client.delete(f"/api/boards/{row['id']}").status_code == 404

    def test_update_board(self, client):
        board = create_board(client)

        response = client.put(f"/api/boards/{board['id']}", json={"name": "Meal prep", "icon": "ChefHat"})

        assert response.status_code == 200
        assert response.json()["board"]["name"] == "Meal prep"
        assert response.json()["board"]["icon"] == "ChefHat"
        assert response.json()["board"]["board_type"] == "kanban"

    def test_update_rejects_empty_name(self, client):
        board = create_board(client)
        assert client.put(f"/api/boards/{board['id']}", json={"name": ""}).status_code == 422

    def test_delete_board(self, client):
        board = create_board(client)

        assert client.delete(f"/api/boards/{board['id']}").json()["success"] is True
        assert client.get(f"/api/boards/{board['id']}").status_code == 404

    def test_reorder_boards(self, client):
        ids = [create_board(client, name=f"Board {i}")["id"] for i in range(3)]

        response = client.post("/api/boards/reorder", json={"board_ids": list(reversed(ids))})

        assert response.status_code == 200
        assert [b["id"] for b in client.get("/api/boards").json()["boards"]] == list(reversed(ids))

    def test_reorder_rejects_foreign_boards(self, client):
        create_board(client)
        assert client.post("/api/boards/reorder", json={"board_ids": ["nope"]}).status_code == 404


class TestStarterBoards:

    def test_new_user_gets_starter_boards(self, client):
        body = client.post("/api/boards/starter").json()

        assert body["count"] == 2
        job, recipes = body["boards"]
        assert (job["name"], job["template_type"], job["icon"]) == ("Job Applications", "job_tracker", "Briefcase")
        assert (recipes["name"], recipes["template_type"], recipes["color"]) == ("Recipe Collection", "recipe", "#f59e0b")
        assert recipes["board_type"] == "list"
        assert recipes["field_config"] == {"starter": True}

    def test_is_idempotent(self, client):
        client.post("/api/boards/starter")
        assert client.post("/api/boards/starter").json()["count"] == 2

    def test_existing_users_are_left_alone(self, client):
        create_board(client)
        body = client.post("/api/boards/starter").json()
        assert [b["name"] for b in body["boards"]] == ["Weeknight dinners"]


def test_health(client):
    assert client.get("/api/health/").json() == {"status": "healthy", "service": "lifelog-backend"}


def test_requests_without_token_are_rejected(repos):
    app.dependency_overrides[get_repositories] = lambda: repos
    try:
        with TestClient(app) as anonymous:
            response = anonymous.get("/api/boards")
            bad_scheme = anonymous.get("/api/boards", headers={"Authorization": "Basic abc"})
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 401
    assert bad_scheme.status_code == 401
