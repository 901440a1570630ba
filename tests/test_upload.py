from fastapi import status

from conftest import API
from storefront.core.config import settings
from storefront.main import app
from storefront.services.storage import StorageService, get_storage_service

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def test_upload_stores_image(client, owner, storage):
    response = client.post(
        f"{API}/upload",
        files={"file": ("photo.PNG", PNG_BYTES, "image/png")},
        data={"folder": "products"},
        headers=owner["headers"],
    )

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["storage_key"].startswith("products/")
    assert body["storage_key"].endswith(".png")
    assert body["url"].endswith(body["storage_key"])
    assert storage.objects[body["storage_key"]] == PNG_BYTES


def test_upload_requires_session(client):
    response = client.post(f"{API}/upload", files={"file": ("photo.jpg", PNG_BYTES, "image/jpeg")})

    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_upload_rejects_non_images(client, owner):
    response = client.post(
        f"{API}/upload",
        files={"file": ("notes.pdf", b"%PDF-1.7", "application/pdf")},
        headers=owner["headers"],
    )

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "error" in response.json()


def test_upload_rejects_empty_file(client, owner):
    response = client.post(
        f"{API}/upload", files={"file": ("photo.jpg", b"", "image/jpeg")}, headers=owner["headers"]
    )

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json() == {"error": "File is empty"}


def test_upload_rejects_oversized_file(client, owner, storage):
    response = client.post(
        f"{API}/upload",
        files={"file": ("big.jpg", b"\xff" * (settings.MAX_UPLOAD_SIZE + 1), "image/jpeg")},
        headers=owner["headers"],
    )

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert storage.objects == {}


def test_upload_rejects_folder_traversal(client, owner):
    response = client.post(
        f"{API}/upload",
        files={"file": ("photo.jpg", PNG_BYTES, "image/jpeg")},
        data={"folder": "../secrets"},
        headers=owner["headers"],
    )

    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_public_upload_goes_to_public_folder(client, storage):
    response = client.post(
        f"{API}/public-upload", files={"file": ("logo.webp", PNG_BYTES, "image/webp")}
    )

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["storage_key"].startswith("public/")


def test_upload_without_storage_configured(client, owner):
    app.dependency_overrides[get_storage_service] = lambda: None

    response = client.post(
        f"{API}/upload", files={"file": ("photo.jpg", PNG_BYTES, "image/jpeg")}, headers=owner["headers"]
    )

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json() == {"error": "Image storage is not configured"}


def test_storage_key_layout():
    key = StorageService.build_key("/products/", "jpg")

    folder, name = key.split("/")
    stamp, rest = name.split("_")
    assert folder == "products"
    assert len(stamp) == 8 and stamp.isdigit()
    assert len(rest) == len("0123abcd.jpg")
