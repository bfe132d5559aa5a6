import os
import sys
import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sampleparquet.app.config import Config
from sampleparquet.app.factory import create_app
from sampleparquet.app.extensions import db
from sampleparquet.app.cli import create_admin_user, seed_settings
from sampleparquet.app.models import Category, Product

ADMIN_EMAIL = "admin@test.com"
ADMIN_PASSWORD = "Test123!"


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    # Use SQLite in tests for simplicity.
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    BASE_PATH = "/"


class BasePathConfig(TestConfig):
    BASE_PATH = "/ozanparquet/"


def _build(config):
    app = create_app(config)
    with app.app_context():
        db.create_all()
        create_admin_user(ADMIN_EMAIL, ADMIN_PASSWORD, "Test Admin")
        seed_settings()

        laminate = Category(name="Laminate", slug="laminate", display_order=0)
        db.session.add(laminate)
        db.session.flush()
        db.session.add_all([
            Product(category_id=laminate.id, name="Oak 8mm", slug="oak-8mm", thickness="8mm",
                    color_tone="Natural Oak", surface_finish="Matte", featured=True, in_stock=True),
            Product(category_id=laminate.id, name="Walnut 10mm", slug="walnut-10mm", thickness="10mm",
                    color_tone="Dark", surface_finish="Embossed", in_stock=False),
            Product(name="Loose Plank", slug="loose-plank", thickness="12mm"),
        ])
        db.session.commit()
    return app


@pytest.fixture()
def app():
    app = _build(TestConfig)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    with app.test_client() as client:
        yield client


@pytest.fixture()
def admin_client(client):
    r = client.post("/api/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert r.status_code == 200
    return client


@pytest.fixture()
def base_client():
    app = _build(BasePathConfig)
    with app.test_client() as client:
        yield client
    with app.app_context():
        db.session.remove()
        db.drop_all()
