"""
Pytest fixtures for the storefront API tests.

Each test gets a fresh application on an in-memory SQLite database.
"""

import pytest

from storefront.app import create_app
from storefront.config.settings import TestConfig
from storefront.models.database import db
from storefront.services.auth_service import AuthService
from storefront.services.catalog_service import CatalogService

PASSWORD = "Password123!"


@pytest.fixture(scope='function')
def app():
    """Create application for testing."""
    app = create_app(TestConfig)

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def make_user(app):
    """Factory creating users directly through the service layer."""
    def _make_user(email="jane@shop.test", role="user", **kwargs):
        fields = {
            "firstname": "Jane",
            "middlename": "Q",
            "lastname": "Doe",
            "address": "12 Mango St",
            "contact": "0917-000-0000",
        }
        fields.update(kwargs)
        return AuthService.register_user(email=email, password=PASSWORD, role=role, **fields)
    return _make_user


@pytest.fixture(scope='function')
def make_product(app):
    def _make_product(name="TJ Classic", price=195, stock=10, **kwargs):
        return CatalogService.create_product({"name": name, "price": price, "stock": stock, **kwargs})
    return _make_product


def login(client, email, password=PASSWORD):
    """Log the test client in; the session cookie stays in its jar."""
    return client.post('/api/login', json={'email': email, 'password': password})


@pytest.fixture(scope='function')
def admin_client(app, make_user):
    """Test client holding an admin session."""
    make_user(email="admin@shop.test", role="admin", firstname="Ada", middlename="", lastname="Admin")
    client = app.test_client()
    assert login(client, "admin@shop.test").status_code == 200
    return client


@pytest.fixture(scope='function')
def user_client(app, make_user):
    """Test client holding a regular user session."""
    make_user(email="jane@shop.test")
    client = app.test_client()
    assert login(client, "jane@shop.test").status_code == 200
    return client
