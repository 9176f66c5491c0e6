"""
Integration test: HTTP API over local storage.
"""

import io
import pytest

from config import ADMIN_PASSWORD
from repositories import configure_repository


@pytest.fixture
def environ():
    return {}


@pytest.fixture
def client(environ, data_dir, uploads_dir, remote):
    import app

    configure_repository(environ=environ, data_dir=data_dir, uploads_dir=uploads_dir, session=remote)
    app.app.config["TESTING"] = True
    return app.app.test_client()


@pytest.fixture
def admin(client):
    response = client.post("/api/auth/login", json={"password": ADMIN_PASSWORD})
    assert response.status_code == 200
    return client


def create(client, **body):
    return client.post("/api/projects", json={"name": "Thesis", **body})


class TestAuth:

    def test_status_anonymous(self, client):
        assert client.get("/api/auth/status").get_json() == {"isAdmin": False}

    def test_wrong_password(self, client):
        assert client.post("/api/auth/login", json={"password": "nope"}).status_code == 401

    def test_non_ascii_password_rejected(self, client):
        assert client.post("/api/auth/login", json={"password": "pässwört"}).status_code == 401

    def test_non_ascii_admin_password(self, client, monkeypatch):
        monkeypatch.setattr("routes.auth.ADMIN_PASSWORD", "pässwört")
        assert client.post("/api/auth/login", json={"password": "pässwört"}).status_code == 200

    @pytest.mark.parametrize("body", [[ADMIN_PASSWORD], "password", None])
    def test_login_body_not_an_object(self, client, body):
        assert client.post("/api/auth/login", json=body).status_code == 401

    def test_login_logout(self, admin):
        assert admin.get("/api/auth/status").get_json() == {"isAdmin": True}
        admin.post("/api/auth/logout")
        assert admin.get("/api/auth/status").get_json() == {"isAdmin": False}

    def test_mutations_need_admin(self, client):
        assert create(client).status_code == 403
        assert client.patch("/api/projects/1", json={"name": "x"}).status_code == 403
        assert client.delete("/api/projects/1").status_code == 403
        assert client.delete("/api/files/p/c/f").status_code == 403


class TestProjectsApi:

    def test_list_empty(self, client):
        response = client.get("/api/projects")
        assert response.status_code == 200
        assert response.get_json() == []

    def test_create(self, admin):
        response = create(admin, name="  Thesis  ", moduleName=" CS3000 ")

        assert response.status_code == 201
        body = response.get_json()
        assert body["name"] == "Thesis"
        assert body["moduleName"] == "CS3000"
        assert body["createdAt"] == body["updatedAt"]
        assert admin.get("/api/projects").get_json() == [body]

    @pytest.mark.parametrize("body", [{"name": ""}, {"name": "   "}, {"name": 42}, {}])
    def test_create_requires_name(self, admin, body):
        assert admin.post("/api/projects", json=body).status_code == 400

    def test_create_rejects_non_json(self, admin):
        response = admin.post("/api/projects", data="name=x", content_type="text/plain")
        assert response.status_code == 400

    def test_get_includes_files(self, admin):
        project = create(admin).get_json()

        body = admin.get(f"/api/projects/{project['id']}").get_json()

        assert body["id"] == project["id"]
        assert body["files"] == []

    def test_get_missing(self, client):
        assert client.get("/api/projects/missing").status_code == 404

    def test_update(self, admin):
        project = create(admin, description="old").get_json()

        response = admin.patch(f"/api/projects/{project['id']}", json={"name": "Thesis v2"})

        assert response.status_code == 200
        body = response.get_json()
        assert body["name"] == "Thesis v2"
        assert body["description"] == "old"
        assert body["updatedAt"] > body["createdAt"]

    def test_update_missing(self, admin):
        assert admin.patch("/api/projects/missing", json={"name": "x"}).status_code == 404

    def test_update_blank_name(self, admin):
        project = create(admin).get_json()
        assert admin.patch(f"/api/projects/{project['id']}", json={"name": " "}).status_code == 400

    def test_delete(self, admin):
        project = create(admin).get_json()
        assert admin.delete(f"/api/projects/{project['id']}").status_code == 200
        assert admin.delete(f"/api/projects/{project['id']}").status_code == 404


class TestFilesApi:

    def upload(self, client, project_id, content=b"hello", name="notes.txt", category="reports"):
        return client.post(
            f"/api/projects/{project_id}/files",
            data={"categoryId": category, "file": (io.BytesIO(content), name)},
            content_type="multipart/form-data",
        )

    def test_upload_download_delete(self, admin):
        project = create(admin).get_json()

        response = self.upload(admin, project["id"])
        assert response.status_code == 201
        record = response.get_json()
        assert record["originalName"] == "notes.txt"
        assert record["size"] == 5
        assert "blobUrl" not in record

        url = f"/api/files/{project['id']}/reports/{record['filename']}"
        download = admin.get(url)
        assert download.status_code == 200
        assert download.data == b"hello"
        assert "notes.txt" in download.headers["Content-Disposition"]

        assert admin.delete(url).status_code == 200
        assert admin.get(url).status_code == 404

    def test_list_by_category(self, admin):
        project = create(admin).get_json()
        self.upload(admin, project["id"], category="reports")
        self.upload(admin, project["id"], category="slides")

        all_files = admin.get(f"/api/projects/{project['id']}/files").get_json()
        slides = admin.get(f"/api/projects/{project['id']}/files?category=slides").get_json()

        assert len(all_files) == 2
        assert [f["categoryId"] for f in slides] == ["slides"]

    def test_upload_to_missing_project(self, admin):
        assert self.upload(admin, "missing").status_code == 404

    def test_upload_requires_category(self, admin):
        project = create(admin).get_json()
        assert self.upload(admin, project["id"], category="").status_code == 400

    def test_delete_missing_file(self, admin):
        assert admin.delete("/api/files/p/c/nope.txt").status_code == 404


class TestManagedPlatform:

    @pytest.fixture
    def environ(self, managed_env):
        return managed_env

    def test_list_is_unavailable_not_empty(self, client):
        response = client.get("/api/projects")

        assert response.status_code == 503
        body = response.get_json()
        assert body["error"] == "Failed to fetch projects"
        assert "KV_REST_API_URL" in body["hint"]

    def test_create_is_unavailable(self, admin):
        assert create(admin).status_code == 503
