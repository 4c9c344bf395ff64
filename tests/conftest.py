import os
import uuid
from datetime import datetime, timedelta, timezone

import jwt
import pytest

# Set test environment variables before importing the app
os.environ['FLASK_ENV'] = 'testing'

from product_service import create_app
from product_service.models import db, Product


@pytest.fixture(scope='session')
def app():
    """Create application for the tests."""
    app = create_app('testing')

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture
def client(app):
    """A test client for the app."""
    return app.test_client()


@pytest.fixture
def db_session(app):
    """Database session for a test; tables are emptied afterwards."""
    yield db.session

    db.session.rollback()
    for table in reversed(db.metadata.sorted_tables):
        db.session.execute(table.delete())
    db.session.commit()
    db.session.remove()


@pytest.fixture
def make_product(db_session):
    """Factory persisting a product with sensible defaults."""
    def _make_product(**kwargs):
        defaults = {
            'name': f'Product {uuid.uuid4().hex[:8]}',
            'description': 'Test product',
            'price': 10.0,
            'quantity': 5,
        }
        defaults.update(kwargs)

        product = Product(**defaults)
        db_session.add(product)
        db_session.commit()
        return product

    return _make_product


@pytest.fixture
def make_token(app):
    """Factory for signed bearer tokens."""
    def _make_token(roles=('USER',), sub='user-1', expires_in=3600, secret=None, **claims):
        now = datetime.now(timezone.utc)
        payload = {
            'sub': sub,
            'roles': list(roles),
            'iat': now,
            'exp': now + timedelta(seconds=expires_in),
        }
        payload.update(claims)
        return jwt.encode(payload, secret or app.config['JWT_SECRET'], algorithm='HS256')

    return _make_token


@pytest.fixture
def admin_headers(make_token):
    return {'Authorization': f'Bearer {make_token(roles=["ADMIN"], sub="admin-1")}'}


@pytest.fixture
def user_headers(make_token):
    return {'Authorization': f'Bearer {make_token(roles=["USER"])}'}


@pytest.fixture
def premium_headers(make_token):
    return {'Authorization': f'Bearer {make_token(roles=["PREMIUM_USER"], sub="premium-1")}'}
