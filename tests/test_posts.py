"""
Tests for posts endpoints.
"""
import json
from datetime import datetime, timedelta, timezone
from pathlib import Path

from metalframe.dependencies import get_media, get_post_repository
from metalframe.main import app
from metalframe.media import LocalMediaStore
from metalframe.models.post import Post
from metalframe.repositories import JSONPostRepository
from metalframe.routes import posts as posts_routes

LOCALIZED_FORM = {
    "title": json.dumps({"en": "Stairs", "uk": "Сходи"}),
    "description": json.dumps({"en": "Steel stairs", "uk": "Сталеві сходи"}),
}


def stored_file(media_store, url):
    return Path(media_store.root) / media_store.identifier_from_url(url)


class TestListPosts:
    """Test GET /api/posts."""

    def test_get_posts_empty(self, client):
        """Test getting posts when none exist."""
        response = client.get("/api/posts")
        assert response.status_code == 200
        assert response.json() == []

    def test_get_posts_newest_first(self, client, db):
        """Test posts are returned newest first with string ids."""
        now = datetime.now(timezone.utc)
        db.add_all([
            Post(title="Old", description="d", image_url="/uploads/a.png", created_at=now - timedelta(days=2)),
            Post(title="New", description="d", image_url="/uploads/b.png", created_at=now),
        ])
        db.commit()

        response = client.get("/api/posts")
        assert response.status_code == 200
        data = response.json()
        assert [p["title"] for p in data] == ["New", "Old"]
        assert all(isinstance(p["id"], str) for p in data)
        assert set(data[0]) == {"id", "title", "description", "imageUrl", "createdAt", "updatedAt"}


class TestCreatePost:
    """Test POST /api/posts."""

    def test_create_post_localized(self, client, media_store, image_upload):
        """Test creating a post with JSON-encoded localized fields."""
        response = client.post("/api/posts", data=LOCALIZED_FORM, files=image_upload)
        assert response.status_code == 200
        data = response.json()
        assert data["id"] == "1"
        assert data["title"] == {"en": "Stairs", "uk": "Сходи"}
        assert data["description"]["uk"] == "Сталеві сходи"
        assert data["imageUrl"].startswith("/uploads/")
        assert data["imageUrl"].endswith(".png")
        assert data["createdAt"] is not None
        assert data["updatedAt"] is None
        assert stored_file(media_store, data["imageUrl"]).exists()

    def test_create_post_plain_text(self, client, image_upload):
        """Test plain strings are stored as-is."""
        response = client.post(
            "/api/posts",
            data={"title": "Canopy", "description": "Galvanized frame"},
            files=image_upload,
        )
        assert response.status_code == 200
        assert response.json()["title"] == "Canopy"

    def test_create_post_malformed_json_kept_as_text(self, client, image_upload):
        """Test a title that looks like JSON but is not stays a string."""
        response = client.post(
            "/api/posts",
            data={"title": "{not json", "description": "d"},
            files=image_upload,
        )
        assert response.status_code == 200
        assert response.json()["title"] == "{not json"

    def test_create_post_without_image_fails(self, client):
        """Test creating a post without an image is rejected."""
        response = client.post("/api/posts", data=LOCALIZED_FORM)
        assert response.status_code == 400
        assert response.json()["error"] == "Image is required"
        assert client.get("/api/posts").json() == []

    def test_create_post_image_too_large(self, client, monkeypatch):
        """Test the upload size limit."""
        monkeypatch.setattr(posts_routes.settings, "max_upload_bytes", 16)
        response = client.post(
            "/api/posts",
            data=LOCALIZED_FORM,
            files={"image": ("big.png", b"x" * 17, "image/png")},
        )
        assert response.status_code == 413
        assert "too large" in response.json()["error"]

    def test_create_post_media_failure_reports_error(self, client, tmp_path, image_upload):
        """Test an upload failure surfaces as 500 with the error text."""
        class BrokenStore(LocalMediaStore):
            def upload(self, data, filename="image", content_type=None):
                raise OSError("disk full")

        app.dependency_overrides[get_media] = lambda: BrokenStore(str(tmp_path / "broken"))
        response = client.post("/api/posts", data=LOCALIZED_FORM, files=image_upload)
        assert response.status_code == 500
        assert response.json()["error"] == "disk full"

    def test_create_post_rejects_non_text_mapping(self, client, media_store, image_upload):
        """Test a mapping with non-text values is refused before anything is stored."""
        response = client.post(
            "/api/posts",
            data={"title": json.dumps({"en": 5, "uk": "x"}), "description": "d"},
            files=image_upload,
        )
        assert response.status_code == 400
        assert response.json()["details"] == {"field": "title"}
        assert list(Path(media_store.root).iterdir()) == []

        listing = client.get("/api/posts")
        assert listing.status_code == 200
        assert listing.json() == []

    def test_create_post_insert_failure_removes_upload(self, client, media_store, tmp_path, image_upload):
        """Test the uploaded image is removed when the record cannot be stored."""
        class FullRepository(JSONPostRepository):
            def insert_post(self, title, description, image_url, created_at=None):
                raise OSError("database is locked")

        app.dependency_overrides[get_post_repository] = lambda: FullRepository(str(tmp_path / "posts.json"))
        response = client.post("/api/posts", data=LOCALIZED_FORM, files=image_upload)
        assert response.status_code == 500
        assert response.json()["error"] == "database is locked"
        assert list(Path(media_store.root).iterdir()) == []

    def test_ids_not_reused_after_delete(self, client, image_upload):
        """Test a deleted post's id is never handed to a new post."""
        client.post("/api/posts", data=LOCALIZED_FORM, files=image_upload)
        second = client.post("/api/posts", data=LOCALIZED_FORM, files=image_upload).json()
        client.delete(f"/api/posts/{second['id']}")

        third = client.post("/api/posts", data=LOCALIZED_FORM, files=image_upload).json()
        assert third["id"] == "3"


class TestUpdatePost:
    """Test PUT /api/posts/{id}."""

    def _create(self, client, image_upload):
        return client.post("/api/posts", data=LOCALIZED_FORM, files=image_upload).json()

    def test_update_keeps_image(self, client, image_upload):
        """Test an update without an image keeps the previous URL."""
        created = self._create(client, image_upload)
        response = client.put(
            f"/api/posts/{created['id']}",
            data={"title": json.dumps({"en": "Ladder", "uk": "Драбина"})},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["id"] == created["id"]
        assert data["title"]["en"] == "Ladder"
        assert data["description"] == created["description"]
        assert data["imageUrl"] == created["imageUrl"]
        assert data["updatedAt"] is not None

    def test_update_replaces_image_and_deletes_old(self, client, media_store, image_upload):
        """Test a new image replaces the old one in the media store."""
        created = self._create(client, image_upload)
        old_file = stored_file(media_store, created["imageUrl"])
        assert old_file.exists()

        response = client.put(
            f"/api/posts/{created['id']}",
            data=LOCALIZED_FORM,
            files={"image": ("new.jpg", b"jpegdata", "image/jpeg")},
        )
        assert response.status_code == 200
        new_url = response.json()["imageUrl"]
        assert new_url != created["imageUrl"]
        assert not old_file.exists()
        assert stored_file(media_store, new_url).read_bytes() == b"jpegdata"

    def test_update_rejects_non_text_mapping(self, client, image_upload):
        """Test an invalid description leaves the stored post untouched."""
        created = self._create(client, image_upload)
        response = client.put(
            f"/api/posts/{created['id']}",
            data={"description": json.dumps({"en": ["steel"], "uk": "Сталь"})},
        )
        assert response.status_code == 400
        assert response.json()["details"] == {"field": "description"}

        listing = client.get("/api/posts")
        assert listing.status_code == 200
        assert listing.json()[0]["description"] == created["description"]

    def test_update_unknown_post(self, client):
        """Test updating a missing post returns 404."""
        response = client.put("/api/posts/99999", data=LOCALIZED_FORM)
        assert response.status_code == 404
        assert response.json()["error"] == "Not found"

    def test_update_non_numeric_id(self, client):
        """Test ids that cannot exist in the table are simply unknown."""
        response = client.put("/api/posts/abc", data=LOCALIZED_FORM)
        assert response.status_code == 404


class TestDeletePost:
    """Test DELETE /api/posts/{id}."""

    def test_delete_post(self, client, media_store, image_upload):
        """Test deleting a post removes the record and its image."""
        created = client.post("/api/posts", data=LOCALIZED_FORM, files=image_upload).json()
        image_file = stored_file(media_store, created["imageUrl"])

        response = client.delete(f"/api/posts/{created['id']}")
        assert response.status_code == 200
        assert response.json() == {"ok": True}
        assert not image_file.exists()
        assert client.get("/api/posts").json() == []

    def test_delete_unknown_post(self, client):
        """Test deleting a missing post returns 404."""
        response = client.delete("/api/posts/99999")
        assert response.status_code == 404
        assert response.json()["error"] == "Not found"

    def test_delete_survives_media_failure(self, client, db, tmp_path):
        """Test an image delete failure does not block the record delete."""
        class StubbornStore(LocalMediaStore):
            def delete(self, identifier):
                raise PermissionError("read-only filesystem")

        post = Post(title="T", description="D", image_url="/uploads/keep.png")
        db.add(post)
        db.commit()

        store = StubbornStore(str(tmp_path / "stubborn"), "/uploads")
        app.dependency_overrides[get_media] = lambda: store

        response = client.delete(f"/api/posts/{post.id}")
        assert response.status_code == 200
        assert client.get("/api/posts").json() == []


class TestImportPosts:
    """Test POST /api/import."""

    LOCAL_POSTS = [
        {"id": "2", "title": {"en": "B", "uk": "Б"}, "description": "second",
         "imageUrl": "data:image/png;base64,AAAA", "createdAt": "2024-05-02T10:00:00Z"},
        {"id": "1", "title": {"en": "A", "uk": "А"}, "description": "first",
         "imageUrl": "data:image/png;base64,BBBB", "createdAt": "2024-05-01T10:00:00Z"},
    ]

    def test_import_posts(self, client):
        """Test bulk import appends posts with server-assigned ids."""
        response = client.post("/api/import", json={"posts": self.LOCAL_POSTS})
        assert response.status_code == 200
        assert response.json() == {"ok": True, "imported": 2}

        data = client.get("/api/posts").json()
        assert [p["title"]["en"] for p in data] == ["B", "A"]
        assert data[1]["createdAt"].startswith("2024-05-01T10:00:00")

    def test_import_is_append_only(self, client):
        """Test importing twice duplicates the posts."""
        client.post("/api/import", json={"posts": self.LOCAL_POSTS})
        client.post("/api/import", json={"posts": self.LOCAL_POSTS})
        assert len(client.get("/api/posts").json()) == 4

    def test_import_empty(self, client):
        """Test an empty body imports nothing."""
        response = client.post("/api/import", json={})
        assert response.status_code == 200
        assert response.json()["imported"] == 0


class TestJSONBackend:
    """The same endpoints served from the flat-file repository."""

    def test_crud_against_json_file(self, client, tmp_path, image_upload):
        """Test create, update and delete with the JSON backend."""
        posts_file = tmp_path / "posts.json"
        app.dependency_overrides[get_post_repository] = lambda: JSONPostRepository(str(posts_file))

        created = client.post("/api/posts", data=LOCALIZED_FORM, files=image_upload).json()
        assert created["id"] == "1"
        assert json.loads(posts_file.read_text(encoding="utf-8"))["posts"][0]["title"]["uk"] == "Сходи"

        updated = client.put("/api/posts/1", data={"description": "Plain"}).json()
        assert updated["description"] == "Plain"
        assert updated["title"] == created["title"]

        assert client.delete("/api/posts/1").json() == {"ok": True}
        assert client.get("/api/posts").json() == []


class TestAppEndpoints:
    """Test service endpoints."""

    def test_health(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_security_headers(self, client):
        response = client.get("/api/posts")
        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert "data:" in response.headers["Content-Security-Policy"]
