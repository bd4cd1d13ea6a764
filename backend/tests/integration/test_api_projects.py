"""Integration tests for Projects and Folders API.

Test cases for:
- Project creation, listing and populated reads
- Folder creation, moves and cascading deletes
- Read access of private and public projects
"""

API = "/api/v1"


def post(client, path: str, headers: dict, **body) -> dict:
    response = client.post(f"{API}{path}", json=body, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


class TestProjects:
    def test_create_in_workspace(self, client, register):
        ada = register("Ada")
        ws_id = ada["user"]["workspaces"][0]

        project = post(client, "/projects", ada["headers"], name="Python", workspace=ws_id)
        ws = client.get(f"{API}/workspaces/{ws_id}", headers=ada["headers"]).json()["data"]

        assert project["id"].startswith("proj_")
        assert project["workspace"] == ws_id
        assert ws["projects"] == [project["id"]]

    def test_create_in_unknown_workspace(self, client, register):
        ada = register("Ada")

        response = client.post(f"{API}/projects", json={"name": "X", "workspace": "ws_missing"}, headers=ada["headers"])

        assert response.status_code == 404

    def test_list_mine(self, client, register):
        ada = register("Ada")
        bob = register("Bob")
        first = post(client, "/projects", ada["headers"], name="One")
        second = post(client, "/projects", ada["headers"], name="Two")
        post(client, "/projects", bob["headers"], name="Bob's")

        ids = [p["id"] for p in client.get(f"{API}/projects", headers=ada["headers"]).json()["data"]]

        assert set(ids) == {first["id"], second["id"]}

    def test_private_project_hidden_from_stranger(self, client, register):
        ada = register("Ada")
        bob = register("Bob")
        private = post(client, "/projects", ada["headers"], name="Secret", visibility="private")
        public = post(client, "/projects", ada["headers"], name="Open", visibility="public")

        assert client.get(f"{API}/projects/{private['id']}", headers=bob["headers"]).status_code == 403
        assert client.get(f"{API}/projects/{public['id']}", headers=bob["headers"]).status_code == 200

    def test_workspace_projects_filtered_by_access(self, client, register):
        ada = register("Ada")
        bob = register("Bob")
        ws = post(client, "/workspaces", ada["headers"], name="Shared", visibility="public")
        open_project = post(client, "/projects", ada["headers"], name="Open", workspace=ws["id"], visibility="public")
        post(client, "/projects", ada["headers"], name="Secret", workspace=ws["id"], visibility="private")

        listed = client.get(f"{API}/workspaces/{ws['id']}/projects", headers=bob["headers"]).json()["data"]

        assert [p["id"] for p in listed] == [open_project["id"]]

    def test_populated_get_and_tree(self, client, register):
        ada = register("Ada")
        project = post(client, "/projects", ada["headers"], name="Course")
        folder = post(client, "/folders", ada["headers"], name="Week 1", project=project["id"])
        sub = post(client, "/folders", ada["headers"], name="Day 1", parentFolder=folder["id"])
        pathway = post(client, "/pathways", ada["headers"], title="Intro", folder=sub["id"])

        detail = client.get(f"{API}/projects/{project['id']}", headers=ada["headers"]).json()["data"]
        tree = client.get(f"{API}/projects/{project['id']}/tree", headers=ada["headers"]).json()["data"]

        assert detail["folders"][0]["name"] == "Week 1"
        assert tree["folders"][0]["folders"][0]["pathways"][0]["id"] == pathway["id"]

    def test_update_owner_only(self, client, register):
        ada = register("Ada")
        bob = register("Bob")
        project = post(client, "/projects", ada["headers"], name="Course", visibility="public")

        denied = client.put(f"{API}/projects/{project['id']}", json={"name": "Mine"}, headers=bob["headers"])
        renamed = client.put(f"{API}/projects/{project['id']}", json={"name": "Course 2"}, headers=ada["headers"])

        assert denied.status_code == 403
        assert renamed.json()["data"]["name"] == "Course 2"

    def test_delete_cascades(self, client, register):
        ada = register("Ada")
        project = post(client, "/projects", ada["headers"], name="Course")
        folder_a = post(client, "/folders", ada["headers"], name="A", project=project["id"])
        folder_b = post(client, "/folders", ada["headers"], name="B", project=project["id"])
        path_a = post(client, "/pathways", ada["headers"], title="PA", folder=folder_a["id"])
        path_b = post(client, "/pathways", ada["headers"], title="PB", project=project["id"])

        response = client.delete(f"{API}/projects/{project['id']}", headers=ada["headers"])

        assert response.status_code == 200
        for path in (
            f"/projects/{project['id']}",
            f"/folders/{folder_a['id']}",
            f"/folders/{folder_b['id']}",
            f"/pathways/{path_a['id']}",
            f"/pathways/{path_b['id']}",
        ):
            assert client.get(f"{API}{path}", headers=ada["headers"]).status_code == 404


class TestFolders:
    def test_create_requires_target(self, client, register):
        ada = register("Ada")

        response = client.post(f"{API}/folders", json={"name": "Loose"}, headers=ada["headers"])

        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_get_populated(self, client, register):
        ada = register("Ada")
        project = post(client, "/projects", ada["headers"], name="Course")
        folder = post(client, "/folders", ada["headers"], name="Top", project=project["id"])
        sub = post(client, "/folders", ada["headers"], name="Sub", parentFolder=folder["id"])

        data = client.get(f"{API}/folders/{folder['id']}", headers=ada["headers"]).json()["data"]

        assert data["subFolders"][0]["id"] == sub["id"]
        assert sub["project"] == project["id"]

    def test_move(self, client, register):
        ada = register("Ada")
        project = post(client, "/projects", ada["headers"], name="Course")
        a = post(client, "/folders", ada["headers"], name="A", project=project["id"])
        b = post(client, "/folders", ada["headers"], name="B", project=project["id"])

        moved = client.put(f"{API}/folders/{b['id']}/move", json={"parentFolder": a["id"]}, headers=ada["headers"])
        cycle = client.put(f"{API}/folders/{a['id']}/move", json={"parentFolder": b["id"]}, headers=ada["headers"])

        assert moved.json()["data"]["parentFolder"] == a["id"]
        assert cycle.status_code == 400

    def test_delete_folder_cascades(self, client, register):
        ada = register("Ada")
        project = post(client, "/projects", ada["headers"], name="Course")
        folder = post(client, "/folders", ada["headers"], name="Top", project=project["id"])
        sub = post(client, "/folders", ada["headers"], name="Sub", parentFolder=folder["id"])
        pathway = post(client, "/pathways", ada["headers"], title="Deep", folder=sub["id"])

        client.delete(f"{API}/folders/{folder['id']}", headers=ada["headers"])

        assert client.get(f"{API}/folders/{sub['id']}", headers=ada["headers"]).status_code == 404
        assert client.get(f"{API}/pathways/{pathway['id']}", headers=ada["headers"]).status_code == 404
        detail = client.get(f"{API}/projects/{project['id']}", headers=ada["headers"]).json()["data"]
        assert detail["folders"] == []

    def test_delete_nested_folder_unlinks_parent(self, client, register):
        ada = register("Ada")
        project = post(client, "/projects", ada["headers"], name="Course")
        folder = post(client, "/folders", ada["headers"], name="Top", project=project["id"])
        sub = post(client, "/folders", ada["headers"], name="Sub", parentFolder=folder["id"])
        keep = post(client, "/folders", ada["headers"], name="Keep", parentFolder=folder["id"])

        response = client.delete(f"{API}/folders/{sub['id']}", headers=ada["headers"])
        parent = client.get(f"{API}/folders/{folder['id']}", headers=ada["headers"]).json()["data"]

        assert response.status_code == 200
        assert [f["id"] for f in parent["subFolders"]] == [keep["id"]]
        assert client.get(f"{API}/folders/{sub['id']}", headers=ada["headers"]).status_code == 404

    def test_scoped_delete(self, client, register):
        ada = register("Ada")
        project = post(client, "/projects", ada["headers"], name="Course")
        other = post(client, "/projects", ada["headers"], name="Other")
        folder = post(client, "/folders", ada["headers"], name="F", project=other["id"])

        wrong = client.delete(f"{API}/projects/{project['id']}/folders/{folder['id']}", headers=ada["headers"])
        right = client.delete(f"{API}/projects/{other['id']}/folders/{folder['id']}", headers=ada["headers"])

        assert wrong.status_code == 404
        assert right.json()["message"] == "Folder deleted"

    def test_integrity_endpoint_is_admin_only(self, client, register):
        ada = register("Ada")

        assert client.get(f"{API}/health/integrity", headers=ada["headers"]).status_code == 403
