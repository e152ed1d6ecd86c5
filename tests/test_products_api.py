# tests/test_products_api.py
import pytest
from fastapi.testclient import TestClient

from marqueza_api import config
from marqueza_api.database import CATEGORIES, PRODUCTS, add_category, clear_all
from marqueza_api.main import app

client = TestClient(app)

PNG = b"\x89PNG\r\n\x1a\n" + b"0" * 64


def reset():
    client.post("/api/reset")


@pytest.fixture(autouse=True)
def upload_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "UPLOAD_DIR", str(tmp_path))
    reset()
    return tmp_path


def _product_form(category_id, **overrides):
    form = {
        "name": "Lavender bouquet",
        "description": "Hand-tied bouquet of dried lavender",
        "price": "19.99",
        "stock": "5",
        "categoryId": category_id,
        "isPersonalizable": "true",
        "details": "",
    }
    form.update(overrides)
    return form


def _create(category_id, **overrides):
    return client.post(
        "/api/products",
        data=_product_form(category_id, **overrides),
        files={"images": ("lavender.png", PNG, "image/png")},
    )


def test_categories_use_bare_array():
    r = client.get("/api/categories")
    assert r.status_code == 200
    body = r.json()
    assert isinstance(body, list)
    assert {c["name"] for c in body} == set(c["name"] for c in CATEGORIES.values())


def test_create_product_returns_reference_and_list_populates_it(upload_dir):
    cat = add_category("Dried flowers", "c1")
    r = _create("c1")
    assert r.status_code == 201
    body = r.json()
    assert body["success"] is True
    product = body["data"]
    assert product["categoryId"] == "c1"
    assert product["price"] == 19.99
    assert product["stock"] == 5
    assert product["isPersonalizable"] is True
    assert product["images"][0].startswith("/uploads/products/")
    stored = list((upload_dir / "products").iterdir())
    assert len(stored) == 1

    listing = client.get("/api/products").json()
    assert listing["success"] is True
    assert listing["data"][0]["categoryId"] == {"_id": "c1", "name": cat["name"]}


def test_create_requires_image():
    add_category("Dried flowers", "c1")
    r = client.post("/api/products", data=_product_form("c1"))
    assert r.status_code == 400
    assert r.json() == {"success": False, "message": "product image is required"}


def test_create_rejects_out_of_range_fields():
    add_category("Dried flowers", "c1")
    r = _create("c1", price="0", stock="-3")
    assert r.status_code == 400
    message = r.json()["message"]
    assert "price" in message
    assert "stock" in message
    assert PRODUCTS == {}


def test_create_rejects_unknown_category():
    r = _create("missing")
    assert r.status_code == 400
    assert r.json()["message"] == "category not found"


def test_upload_rejects_non_images():
    add_category("Dried flowers", "c1")
    r = client.post(
        "/api/products",
        data=_product_form("c1"),
        files={"images": ("notes.txt", b"hello", "text/plain")},
    )
    assert r.status_code == 400
    assert r.json()["message"] == "Only image files are allowed"


def test_upload_enforces_size_cap(upload_dir):
    add_category("Dried flowers", "c1")
    big = b"0" * (config.MAX_UPLOAD_BYTES + 1)
    r = client.post(
        "/api/products",
        data=_product_form("c1"),
        files={"images": ("big.jpg", big, "image/jpeg")},
    )
    assert r.status_code == 413
    assert "5MB" in r.json()["message"]
    # partial file is removed
    assert list((upload_dir / "products").iterdir()) == []


def test_update_with_json_keeps_images():
    add_category("Dried flowers", "c1")
    created = _create("c1").json()["data"]
    body = {
        "name": "Lavender bouquet XL",
        "description": "Hand-tied bouquet of dried lavender",
        "price": 25.5,
        "stock": 2,
        "categoryId": "c1",
        "isPersonalizable": False,
        "details": "Large size",
    }
    r = client.put(f"/api/products/{created['_id']}", json=body)
    assert r.status_code == 200
    updated = r.json()["data"]
    assert updated["name"] == "Lavender bouquet XL"
    assert updated["price"] == 25.5
    assert updated["images"] == created["images"]
    assert updated["categoryId"]["_id"] == "c1"


def test_update_with_multipart_replaces_image():
    add_category("Dried flowers", "c1")
    created = _create("c1").json()["data"]
    r = client.put(
        f"/api/products/{created['_id']}",
        data=_product_form("c1", stock="9"),
        files={"images": ("new.png", PNG, "image/png")},
    )
    assert r.status_code == 200
    updated = r.json()["data"]
    assert updated["stock"] == 9
    assert updated["images"] != created["images"]


def test_update_unknown_product_is_404():
    add_category("Dried flowers", "c1")
    r = client.put("/api/products/nope", json={
        "name": "Lavender", "description": "Hand-tied bouquet", "price": 3,
        "stock": 1, "categoryId": "c1",
    })
    assert r.status_code == 404
    assert r.json()["message"] == "product not found"


def test_delete_product():
    add_category("Dried flowers", "c1")
    created = _create("c1").json()["data"]
    r = client.delete(f"/api/products/{created['_id']}")
    assert r.status_code == 200
    assert r.json()["success"] is True
    assert client.delete(f"/api/products/{created['_id']}").status_code == 404
    assert client.get("/api/products").json()["data"] == []


def _stored_images(upload_dir):
    target = upload_dir / "products"
    return list(target.iterdir()) if target.exists() else []


def test_rejected_create_stores_nothing(upload_dir):
    add_category("Dried flowers", "c1")
    assert _create("c1", price="0").status_code == 400
    assert _create("missing").status_code == 400
    assert _stored_images(upload_dir) == []


def test_rejected_update_stores_nothing(upload_dir):
    add_category("Dried flowers", "c1")
    r = client.put(
        "/api/products/nope",
        data=_product_form("c1"),
        files={"images": ("new.png", PNG, "image/png")},
    )
    assert r.status_code == 404

    created = _create("c1").json()["data"]
    r = client.put(
        f"/api/products/{created['_id']}",
        data=_product_form("missing"),
        files={"images": ("new.png", PNG, "image/png")},
    )
    assert r.status_code == 400
    assert len(_stored_images(upload_dir)) == 1


def test_startup_seeds_and_creates_upload_dir(tmp_path, monkeypatch):
    target = tmp_path / "fresh"
    monkeypatch.setattr(config, "UPLOAD_DIR", str(target))
    clear_all()
    with TestClient(app):
        assert target.is_dir()
        assert len(CATEGORIES) == 4
