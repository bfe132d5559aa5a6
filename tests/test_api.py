from sampleparquet.app.extensions import db
from sampleparquet.app.models import AdminUser, QuoteRequest

from conftest import ADMIN_EMAIL, ADMIN_PASSWORD


def test_api_index(client):
    r = client.get("/api")
    assert r.status_code == 200
    assert "endpoints" in r.json


def test_request_id_is_echoed(client):
    r = client.get("/api", headers={"X-Request-ID": "abc-123"})
    assert r.headers["X-Request-ID"] == "abc-123"


def test_session_lifecycle(client):
    assert client.get("/api/auth/session").json == {"state": "anonymous", "admin": None}

    r = client.post("/api/auth/login", json={"email": ADMIN_EMAIL, "password": "nope"})
    assert r.status_code == 401
    assert r.json["error"]["code"] == "unauthorized"

    r = client.post("/api/auth/login", json={"email": ADMIN_EMAIL.upper(), "password": ADMIN_PASSWORD})
    assert r.status_code == 200
    assert r.json["state"] == "authenticated-admin"
    assert r.json["admin"]["email"] == ADMIN_EMAIL

    assert client.get("/api/auth/session").json["state"] == "authenticated-admin"

    assert client.post("/api/auth/logout").json["state"] == "anonymous"
    assert client.get("/api/auth/session").json["state"] == "anonymous"


def test_disabled_admin_loses_session(app, admin_client):
    with app.app_context():
        AdminUser.query.filter_by(email=ADMIN_EMAIL).update({"is_active": False})
        db.session.commit()
    assert admin_client.get("/api/auth/session").json["state"] == "anonymous"
    assert admin_client.get("/admin").status_code == 302


def test_login_requires_json(client):
    r = client.post("/api/auth/login", data={"email": ADMIN_EMAIL})
    assert r.status_code == 400
    assert r.json["error"]["code"] == "invalid_json"


def test_catalog_listing_and_filters(client):
    r = client.get("/api/products")
    assert r.status_code == 200
    assert r.json["paging"]["total"] == 3

    r = client.get("/api/products?color=oak")
    assert [p["slug"] for p in r.json["items"]] == ["oak-8mm"]

    r = client.get("/api/products?thickness=10mm")
    assert [p["slug"] for p in r.json["items"]] == ["walnut-10mm"]

    r = client.get("/api/products?limit=1")
    assert len(r.json["items"]) == 1

    assert client.get("/api/products?limit=abc").status_code == 400


def test_product_by_slug(client):
    r = client.get("/api/products/oak-8mm")
    assert r.status_code == 200
    assert r.json["view_count"] == 1
    assert [p["slug"] for p in r.json["related"]] == ["walnut-10mm"]

    assert client.get("/api/products/nope").status_code == 404


def test_categories_and_settings(client):
    assert [c["slug"] for c in client.get("/api/categories").json["items"]] == ["laminate"]
    settings = client.get("/api/settings").json["settings"]
    assert settings["company_name"] == "Sample Parquet"


def test_quote_submission_validation(client):
    r = client.post("/api/quotes", json={"product_name": "Oak 8mm"})
    assert r.status_code == 400
    assert "area_sqm" in r.json["error"]["details"]["missing"]

    payload = {
        "product_name": "Oak 8mm",
        "area_sqm": -1,
        "delivery_city": "Izmir",
        "service_type": "Product only",
        "customer_name": "Ayşe",
        "customer_phone": "555",
    }
    assert client.post("/api/quotes", json=payload).status_code == 400

    for area in ["nan", "inf", "-inf"]:
        payload["area_sqm"] = area
        r = client.post("/api/quotes", json=payload)
        assert r.status_code == 400
        assert r.json["error"]["code"] == "validation_error"

    payload["area_sqm"] = 30
    r = client.post("/api/quotes", json=payload)
    assert r.status_code == 201
    assert r.json["status"] == "new"


def test_contact_submission(client):
    r = client.post("/api/contact", json={"name": "Ali", "email": "ali@example.com", "message": "Hi"})
    assert r.status_code == 201


def test_admin_endpoints_require_session(client):
    assert client.get("/api/admin/stats").status_code == 401
    assert client.post("/api/admin/products", json={"name": "X"}).status_code == 401


def test_admin_product_crud(admin_client):
    r = admin_client.post("/api/admin/products", json={"name": "Meşe Masif Çizgi", "images": ["a.jpg", " "]})
    assert r.status_code == 201
    product = r.json
    assert product["slug"] == "mese-masif-cizgi"
    assert product["images"] == ["a.jpg"]

    r = admin_client.post("/api/admin/products", json={"name": "Meşe Masif Çizgi"})
    assert r.status_code == 409

    r = admin_client.put(f"/api/admin/products/{product['id']}", json={"featured": True, "slug": ""})
    assert r.status_code == 200
    assert r.json["featured"] is True
    assert r.json["slug"] == "mese-masif-cizgi"

    assert admin_client.delete(f"/api/admin/products/{product['id']}").status_code == 200
    assert admin_client.get(f"/api/products/{product['slug']}").status_code == 404


def test_admin_product_rejects_unknown_category(admin_client):
    r = admin_client.post("/api/admin/products", json={"name": "Ash 8mm", "category_id": 9999})
    assert r.status_code == 400
    assert r.json["error"]["message"] == "Unknown category_id"

    oak = admin_client.get("/api/products/oak-8mm").json
    for bad in [9999, "abc"]:
        r = admin_client.put(f"/api/admin/products/{oak['id']}", json={"category_id": bad})
        assert r.status_code == 400
        assert r.json["error"]["code"] == "validation_error"
    assert admin_client.get("/api/products/oak-8mm").json["category_id"] == oak["category_id"]

    r = admin_client.put(f"/api/admin/products/{oak['id']}", json={"category_id": None})
    assert r.status_code == 200
    assert r.json["category_id"] is None


def test_admin_category_delete_keeps_products(admin_client):
    categories = admin_client.get("/api/admin/categories").json["items"]
    laminate = categories[0]

    r = admin_client.post("/api/admin/categories", json={"name": "Vinyl"})
    assert r.json["slug"] == "vinyl"
    assert r.json["display_order"] == 1

    assert admin_client.delete(f"/api/admin/categories/{laminate['id']}").status_code == 200
    oak = admin_client.get("/api/products/oak-8mm").json
    assert oak["category_id"] is None


def test_admin_quote_workflow(app, admin_client):
    with app.app_context():
        db.session.add(QuoteRequest(product_name="Oak 8mm", area_sqm=20, delivery_city="Bursa",
                                    service_type="Product only", customer_name="Can", customer_phone="1"))
        db.session.commit()
        quote_id = QuoteRequest.query.one().id

    assert admin_client.get("/api/admin/stats").json["counts"]["quote_requests"] == 1

    r = admin_client.patch(f"/api/admin/quotes/{quote_id}", json={"status": "archived"})
    assert r.status_code == 400

    r = admin_client.patch(f"/api/admin/quotes/{quote_id}", json={"status": "contacted"})
    assert r.json["status"] == "contacted"

    assert len(admin_client.get("/api/admin/quotes?status=contacted").json["items"]) == 1
    assert admin_client.get("/api/admin/quotes?status=new").json["items"] == []
    assert len(admin_client.get("/api/admin/quotes?q=can").json["items"]) == 1

    assert admin_client.delete(f"/api/admin/quotes/{quote_id}").status_code == 200


def test_admin_settings_update(admin_client):
    r = admin_client.put(
        "/api/admin/settings",
        json={"settings": {"hero_title": "New floors", "carousel_images": ["/a.jpg"]}},
    )
    assert r.status_code == 200
    settings = admin_client.get("/api/settings").json["settings"]
    assert settings["hero_title"] == "New floors"
    assert settings["carousel_images"] == ["/a.jpg"]

    r = admin_client.put("/api/admin/settings", json={"settings": {"nope": 1}})
    assert r.status_code == 404
