"""
Pytest configuration and fixtures: a fresh in-memory database per test,
user/product factories and JWT headers for the test client.
"""
import itertools

import pytest
from flask_jwt_extended import create_access_token

from main import create_app
from core.config import TestingConfig
from core.extensions import db, bcrypt
from models.userModel import Users, ROLE_SUPPLIER, ROLE_STORE_OWNER
from services import catalog


@pytest.fixture
def app():
    """Create Flask application for testing"""
    app = create_app(TestingConfig)

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(app):
    counter = itertools.count(1)

    def _make(role=ROLE_STORE_OWNER, email=None, password="password123"):
        n = next(counter)
        fields = {}
        if role == ROLE_SUPPLIER:
            fields = {
                "company_name": f"Supplier {n} Ltd",
                "phone_number": f"050000000{n}",
                "representative_name": f"Rep {n}",
            }
        user = Users(
            email=email or f"user{n}@example.com",
            password=bcrypt.generate_password_hash(password).decode('utf-8'),
            role=role,
            **fields
        )
        db.session.add(user)
        db.session.commit()
        return user

    return _make


@pytest.fixture
def supplier(make_user):
    return make_user(ROLE_SUPPLIER)


@pytest.fixture
def other_supplier(make_user):
    return make_user(ROLE_SUPPLIER)


@pytest.fixture
def store_owner(make_user):
    return make_user(ROLE_STORE_OWNER)


@pytest.fixture
def make_product(app):
    counter = itertools.count(1)

    def _make(supplier, price=10, minimum_purchase_quantity=1, current_stock=0,
              minimum_stock_threshold=0, name=None):
        return catalog.create_product(supplier.id, {
            "name": name or f"Product {next(counter)}",
            "price_per_item": price,
            "minimum_purchase_quantity": minimum_purchase_quantity,
            "current_stock": current_stock,
            "minimum_stock_threshold": minimum_stock_threshold,
        })

    return _make


def auth_headers(user):
    token = create_access_token(identity=str(user.id), additional_claims={"role": user.role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def headers_for(app):
    return auth_headers
