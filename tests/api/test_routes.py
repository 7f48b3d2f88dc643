import pytest

from stepflow.api import create_app
from stepflow.config.settings import Settings


@pytest.fixture
def client():
    app = create_app(Settings(_env_file=None))
    app.config["TESTING"] = True
    return app.test_client()


def test_info(client):
    response = client.get("/api/info")
    assert response.status_code == 200
    assert response.get_json()["name"] == "stepflow"


def test_generate_flowchart(client, sample_plan):
    response = client.post("/api/flowchart", json={"prompt": sample_plan})
    assert response.status_code == 200
    body = response.get_json()
    assert len(body["nodes"]) == 7
    assert body["nodes"][0]["data"]["startMarker"]["glyph"] == "▶"
    assert body["edges"][0] == {
        "id": "e-step-1-step-2a",
        "source": "step-1",
        "target": "step-2a",
        "type": "smoothstep",
        "kind": "fan",
        "style": {"stroke": "#f59e0b", "strokeWidth": 2},
    }


def test_generate_with_page_prefix(client):
    response = client.post("/api/flowchart", json={"prompt": "Step 1: A", "page_id": "home"})
    assert response.get_json()["nodes"][0]["id"] == "home-step-1"


def test_empty_plan_is_a_bad_request(client):
    response = client.post("/api/flowchart", json={"prompt": "   "})
    assert response.status_code == 400
    assert response.get_json()["error"] == "Please enter a valid plan with steps"


def test_edit_flowchart(client):
    chart = client.post("/api/flowchart", json={"prompt": "Step 1: A\nStep 2: B"}).get_json()
    response = client.post(
        "/api/flowchart/edit",
        json={
            "flowchart": chart,
            "commands": [
                {"op": "edit_label", "node": "step-1", "label": "Begin"},
                {"op": "delete_node", "node": "B"},
            ],
        },
    )
    assert response.status_code == 200
    body = response.get_json()
    assert [node["data"]["label"] for node in body["nodes"]] == ["Begin"]
    assert body["edges"] == []


def test_edit_requires_command_list(client):
    response = client.post("/api/flowchart/edit", json={"flowchart": {}, "commands": "nope"})
    assert response.status_code == 400


def test_edit_unknown_node(client):
    response = client.post(
        "/api/flowchart/edit",
        json={"flowchart": {}, "commands": [{"op": "delete_node", "node": "ghost"}]},
    )
    assert response.status_code == 400
    assert "ghost" in response.get_json()["error"]


def test_page_lifecycle(client):
    created = client.post("/api/pages", json={"name": "Checkout"})
    assert created.status_code == 201
    page_id = created.get_json()["id"]

    updated = client.put(f"/api/pages/{page_id}/prompt", json={"prompt": "Step 1: Pay"})
    assert updated.get_json()["nodes"][0]["id"] == f"{page_id}-step-1"

    listing = client.get("/api/pages").get_json()
    assert listing["active_page_id"] == page_id

    merged = client.get("/api/pages/merged").get_json()
    assert [node["id"] for node in merged["nodes"]] == [f"{page_id}-step-1"]

    assert client.delete(f"/api/pages/{page_id}").status_code == 200
    assert client.delete(f"/api/pages/{page_id}").status_code == 404


def test_add_page_without_name(client):
    assert client.post("/api/pages", json={}).status_code == 400


def test_unknown_page(client):
    assert client.post("/api/pages/page-missing/activate").status_code == 404
    assert client.put("/api/pages/page-missing/prompt", json={"prompt": "x"}).status_code == 404


def test_bulk_pages(client):
    response = client.post("/api/pages/bulk", json={"prompt": "Home:\nStep 1: Land\n\nLogin:\nStep 1: Sign in"})
    assert response.status_code == 201
    pages = response.get_json()["pages"]
    assert [page["name"] for page in pages] == ["Home", "Login"]
    assert all(len(page["nodes"]) == 1 for page in pages)


def test_document_export_and_reconstruct(client):
    chart = client.post("/api/flowchart", json={"prompt": "Step 1: A\nStep 2a: B\nStep 2b: C"}).get_json()
    document = client.post("/api/document/export", json={"flowchart": chart, "prompt": "x"}).get_json()
    assert document["version"] == 1

    response = client.post("/api/document/reconstruct", json={"document": document})
    assert response.get_json()["prompt"] == "Step 1: A\nStep 2a: B\nStep 2b: C"


def test_reconstruct_rejects_bad_document(client):
    response = client.post("/api/document/reconstruct", json={"document": {"nodes": 3}})
    assert response.status_code == 400


def test_edit_with_non_numeric_coordinate(client):
    chart = client.post("/api/flowchart", json={"prompt": "Step 1: A"}).get_json()
    response = client.post(
        "/api/flowchart/edit",
        json={"flowchart": chart, "commands": [{"op": "move_node", "node": "step-1", "x": "left", "y": 0}]},
    )
    assert response.status_code == 400
    assert "'x'" in response.get_json()["error"]


def test_edit_with_non_string_label(client):
    chart = client.post("/api/flowchart", json={"prompt": "Step 1: A"}).get_json()
    response = client.post(
        "/api/flowchart/edit",
        json={"flowchart": chart, "commands": [{"op": "edit_label", "node": "step-1", "label": 5}]},
    )
    assert response.status_code == 400
