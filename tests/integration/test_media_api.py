from unittest.mock import AsyncMock

from castingfy.config import settings
from castingfy.models.domain.media_domain import GalleryImage, StoredObject


def test_gallery_requires_user_id(client):
    response = client.get("/gallery")

    assert response.status_code == 400
    assert response.json() == {"error": "userId parameter is required"}


def test_add_gallery_image(client, login, monkeypatch):
    login("talent-1")
    insert = AsyncMock(
        return_value=GalleryImage(id="img-1", user_id="talent-1", image_url="https://cdn/1.jpg", is_cover=True)
    )
    monkeypatch.setattr("castingfy.services.gallery_service.GalleryRepository.insert", insert)

    response = client.post("/gallery", json={"image_url": "https://cdn/1.jpg", "is_cover": True})

    assert response.status_code == 201
    assert response.json()["image"]["is_cover"] is True
    insert.assert_awaited_once_with(
        "talent-1", "https://cdn/1.jpg", title=None, description=None, display_order=0, is_cover=True
    )


def test_updating_someone_elses_image_is_404(client, login, monkeypatch):
    login("talent-1")
    monkeypatch.setattr(
        "castingfy.services.gallery_service.GalleryRepository.update", AsyncMock(return_value=None)
    )

    response = client.patch("/gallery", json={"imageId": "img-9", "title": "Mine now"})

    assert response.status_code == 404


def test_upload_rejects_non_images(client, login):
    login("talent-1")

    response = client.post(
        "/upload", files={"file": ("notes.pdf", b"%PDF-1.4", "application/pdf")}
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid file type. Only images are allowed."}


def test_upload_rejects_large_files(client, login):
    login("talent-1")
    data = b"0" * (settings.UPLOAD_MAX_BYTES + 1)

    response = client.post("/upload", files={"file": ("big.png", data, "image/png")})

    assert response.status_code == 400
    assert response.json() == {"error": "File too large. Maximum size is 5MB."}


def test_upload_returns_public_url(client, login, monkeypatch):
    login("talent-1")
    upload = AsyncMock(
        return_value=StoredObject(path="gallery/talent-1-1.png", url="https://cdn/gallery/talent-1-1.png")
    )
    monkeypatch.setattr("castingfy.routes.gallery.storage_service.upload_file", upload)

    response = client.post(
        "/upload", files={"file": ("me.png", b"\x89PNG", "image/png")}, data={"folder": "gallery"}
    )

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "url": "https://cdn/gallery/talent-1-1.png",
        "path": "gallery/talent-1-1.png",
    }
    assert upload.await_args.kwargs["folder"] == "gallery"


def test_delete_gallery_image_requires_id(client, login):
    login("talent-1")

    response = client.delete("/gallery")

    assert response.status_code == 400
    assert response.json() == {"error": "imageId parameter is required"}


def test_deleting_someone_elses_image_is_404(client, login, monkeypatch):
    login("talent-2")
    delete = AsyncMock(return_value=False)
    monkeypatch.setattr("castingfy.services.gallery_service.GalleryRepository.delete", delete)

    response = client.delete("/gallery", params={"imageId": "img-1"})

    assert response.status_code == 404
    assert response.json() == {"error": "Image not found"}
    delete.assert_awaited_once_with("talent-2", "img-1")
