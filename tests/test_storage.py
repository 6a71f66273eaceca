"""
测试本地上传存储
"""
import pytest

from app.api.uploads import get_storage_service
from app.core.exceptions import ValidationFailed
from app.services.storage_service import StorageService
from main import app

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


@pytest.fixture
def storage(tmp_path):
    return StorageService(root=str(tmp_path), url_prefix="/uploads", base_url="http://cdn.test", max_bytes=1024)


async def test_upload_and_delete(storage, tmp_path):
    result = await storage.upload(PNG_BYTES, "My Photo (1).png", "image/png")

    assert result["path"].startswith("news-articles/")
    assert result["path"].endswith("_My_Photo_1.png")
    assert result["url"] == f"http://cdn.test/uploads/{result['path']}"
    assert result["size"] == len(PNG_BYTES)
    assert (tmp_path / result["path"]).read_bytes() == PNG_BYTES

    assert await storage.delete(result["url"]) is True
    assert not (tmp_path / result["path"]).exists()
    assert await storage.delete(result["url"]) is False


@pytest.mark.parametrize("content, content_type", [
    (PNG_BYTES, "application/pdf"),
    (b"", "image/png"),
    (b"x" * 2048, "image/jpeg"),
])
async def test_rejects_invalid_uploads(storage, content, content_type):
    with pytest.raises(ValidationFailed):
        await storage.upload(content, "file.bin", content_type)


async def test_delete_ignores_foreign_and_traversal_urls(storage, tmp_path_factory):
    assert await storage.delete("https://elsewhere.example.com/uploads/a.png") is False
    assert await storage.delete("http://cdn.test/uploads/../secrets.txt") is False

    outside = tmp_path_factory.mktemp("outside") / "outside.txt"
    outside.write_text("keep me")
    assert await storage.delete(f"http://cdn.test/uploads/{outside}") is False
    assert await storage.delete(f"/uploads/{outside}") is False
    assert outside.exists()


async def test_delete_rejects_symlinked_escape(storage, tmp_path, tmp_path_factory):
    outside_dir = tmp_path_factory.mktemp("outside")
    outside = outside_dir / "secret.png"
    outside.write_bytes(PNG_BYTES)
    (tmp_path / "news-articles").symlink_to(outside_dir, target_is_directory=True)

    assert await storage.delete("http://cdn.test/uploads/news-articles/secret.png") is False
    assert outside.exists()


async def test_upload_routes(client, storage, author, viewer):
    _, author_headers = author
    _, viewer_headers = viewer
    app.dependency_overrides[get_storage_service] = lambda: storage

    files = {"file": ("cover.png", PNG_BYTES, "image/png")}
    response = await client.post("/api/uploads", headers=viewer_headers, files=files)
    assert response.status_code == 403

    response = await client.post("/api/uploads", headers=author_headers, files=files)
    assert response.status_code == 201
    url = response.json()["data"]["url"]

    response = await client.delete("/api/uploads", headers=author_headers, params={"url": url})
    assert response.status_code == 200
    response = await client.delete("/api/uploads", headers=author_headers, params={"url": url})
    assert response.status_code == 404

    response = await client.post("/api/uploads", headers=author_headers,
                                 files={"file": ("notes.txt", b"hello", "text/plain")})
    assert response.status_code == 422

    response = await client.post("/api/uploads", headers=author_headers,
                                 files={"file": ("large.png", PNG_BYTES * 64, "image/png")})
    assert response.status_code == 422
