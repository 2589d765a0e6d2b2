import os
import sys
import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
from models import db
from brewhub.version import API_PREFIX


@pytest.fixture(scope='session')
def app_instance():
    os.environ.setdefault('APP_ENV', 'testing')
    from brewhub import create_app
    from brewhub.config import TestingConfig
    app = create_app(TestingConfig)
    app.config.update(
        TESTING=True,
        SQLALCHEMY_DATABASE_URI='sqlite:///:memory:',
        SQLALCHEMY_TRACK_MODIFICATIONS=False
    )
    return app


@pytest.fixture(scope='function')
def app(app_instance):
    with app_instance.app_context():
        db.drop_all()
        db.create_all()
        yield app_instance
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    return app.test_client()


def obtain_token(client, user_id, role="customer"):
    resp = client.post("/__auth/login_stub", json={"user_id": user_id, "role": role})
    return resp.get_json()["data"]["access"]


def auth_header(token):
    return {"Authorization": f"Bearer {token}"}


def seed_vendor(client, owner_id="v1", delivery_fee=0, min_order=0, products=None, **extra):
    body = {
        "owner_id": owner_id,
        "delivery_fee": delivery_fee,
        "min_order": min_order,
        "products": products or [{"name": "A", "price": 10}],
    }
    body.update(extra)
    data = client.post("/__seed/vendor", json=body).get_json()["data"]
    return data["vendor_id"], data["product_ids"]


@pytest.fixture
def customer(client):
    return auth_header(obtain_token(client, "cust-1", "customer"))


@pytest.fixture
def api():
    return API_PREFIX
