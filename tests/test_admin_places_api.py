import io
import json
import os

from PIL import Image

from easytrip.api.main import app
from easytrip.core.config import settings
from easytrip.places.models import Place
from easytrip.places.services.image_host import S3ImageHost, get_image_host

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


class UnusedS3:
    def put_object(self, **kwargs):
        raise AssertionError("oversized image must not reach S3")


def _create(client, files=None, **fields):
    data = {"name": "Baga Beach", "location": "Goa"}
    data.update(fields)
    return client.post("/api/admin/places", data=data, files=files)


def test_create_place_without_image(client):
    r = _create(
        client,
        description="  Busy beach  ",
        district="",
        themes=json.dumps(["beach", "family"]),
        tags=json.dumps(["nightlife"]),
        custom_keys=json.dumps({"Best Time to Visit": "November to February"}),
        latitude="15.55",
        longitude="73.75",
    )
    assert r.status_code == 201
    body = r.json()
    assert body["name"] == "Baga Beach"
    assert body["description"] == "Busy beach"
    assert body["district"] is None
    assert body["themes"] == ["beach", "family"]
    assert body["custom_keys"] == {"Best Time to Visit": "November to February"}
    assert body["latitude"] == 15.55
    assert body["rating_count"] == 0 and body["average_rating"] is None
    assert body["primary_image_url"] is None
    assert body["image_url"] == f"/api/places/{body['id']}/image"
    assert body["created_by"] == settings.dev_default_user_id


def test_create_requires_name_and_location(client):
    r = client.post("/api/admin/places", data={"name": "  ", "location": "Goa"})
    assert r.status_code == 400
    assert "Name and location" in r.json()["detail"]
    assert client.post("/api/admin/places", data={"name": "X"}).status_code == 400


def test_create_rejects_malformed_json_fields(client):
    assert _create(client, themes="[beach").status_code == 400
    assert _create(client, custom_keys='["not", "a", "map"]').status_code == 400


def test_create_with_image_sets_primary_url(client, image_host, tmp_path):
    r = _create(client, files={"image": ("beach.png", PNG_BYTES, "image/png")})
    assert r.status_code == 201
    body = r.json()

    assert len(image_host.uploads) == 1
    upload = image_host.uploads[0]
    assert upload["folder"] == f"{settings.image_folder}/places/{body['id']}"
    assert upload["public_id"].startswith(f"place_{body['id']}_primary_")
    assert body["primary_image_url"].startswith("https://images.example.com/")
    assert body["image_url"] == body["primary_image_url"]
    # staged file is removed after the attempt
    assert os.listdir(tmp_path / "uploads") == []


def test_failed_upload_still_creates_place(client, image_host, db_session):
    image_host.fail = True
    r = _create(client, files={"image": ("beach.png", PNG_BYTES, "image/png")})
    assert r.status_code == 201
    body = r.json()
    assert body["primary_image_url"] is None
    assert body["image_url"] == f"/api/places/{body['id']}/image"
    assert db_session.query(Place).count() == 1


def test_image_over_pixel_limit_still_creates_place(client, monkeypatch, db_session):
    host = S3ImageHost("easytrip-images", "ap-south-1", "key", "secret")
    host.s3_client = UnusedS3()
    app.dependency_overrides[get_image_host] = lambda: host
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)

    buffer = io.BytesIO()
    Image.new("RGB", (40, 30), "white").save(buffer, format="PNG")
    r = _create(client, files={"image": ("huge.png", buffer.getvalue(), "image/png")})

    assert r.status_code == 201
    assert r.json()["primary_image_url"] is None
    assert db_session.query(Place).count() == 1


def test_non_image_or_oversize_upload_is_400(client, monkeypatch, db_session):
    r = _create(client, files={"image": ("notes.txt", b"hello", "text/plain")})
    assert r.status_code == 400

    monkeypatch.setattr(settings, "max_upload_bytes", 16)
    r = _create(client, files={"image": ("big.png", PNG_BYTES, "image/png")})
    assert r.status_code == 400
    assert "upload limit" in r.json()["detail"]

    assert db_session.query(Place).count() == 0


def test_update_is_partial(client):
    created = _create(client, description="Old", tags=json.dumps(["a"])).json()

    r = client.put(f"/api/admin/places/{created['id']}", data={"description": "New", "name": ""})
    assert r.status_code == 200
    body = r.json()
    assert body["description"] == "New"
    assert body["name"] == "Baga Beach"
    assert body["location"] == "Goa"
    assert body["tags"] == ["a"]


def test_update_blank_optional_field_clears_it(client):
    created = _create(client, district="North Goa").json()
    body = client.put(f"/api/admin/places/{created['id']}", data={"district": "  "}).json()
    assert body["district"] is None


def test_update_with_failed_image_keeps_old_url(client, image_host):
    created = _create(client, files={"image": ("a.png", PNG_BYTES, "image/png")}).json()
    old_url = created["primary_image_url"]

    image_host.fail = True
    r = client.put(
        f"/api/admin/places/{created['id']}",
        data={"name": "Baga"},
        files={"image": ("b.png", PNG_BYTES, "image/png")},
    )
    assert r.status_code == 200
    assert r.json()["primary_image_url"] == old_url
    assert r.json()["name"] == "Baga"


def test_update_and_delete_missing_place_is_404(client):
    assert client.put("/api/admin/places/999", data={"name": "x"}).status_code == 404
    assert client.delete("/api/admin/places/999").status_code == 404


def test_delete_place(client):
    created = _create(client).json()
    r = client.delete(f"/api/admin/places/{created['id']}")
    assert r.status_code == 200
    assert r.json()["name"] == "Baga Beach"
    assert client.get(f"/api/places/{created['id']}").status_code == 404
