import uuid
from dataclasses import FrozenInstanceError

import pytest

from product_service.models import Product, StockLineItem


class TestProductModel:
    """Test the Product model."""

    def test_defaults_assigned_on_insert(self, db_session):
        """Test defaults assigned on insert."""
        """Id, deleted flag and timestamps are system-assigned."""
        product = Product(name='Desk Lamp', price=24.5, quantity=3)
        db_session.add(product)
        db_session.commit()

        assert uuid.UUID(product.id)
        assert product.deleted is False
        assert product.created_at is not None
        assert product.updated_at is not None

    def test_to_dict(self, make_product):
        """Test to dict."""
        """Public representation uses camelCase keys and hides the deleted flag."""
        product = make_product(name='Kettle', description='1.7L', price=39.99, quantity=7)

        data = product.to_dict()

        assert data['id'] == product.id
        assert data['name'] == 'Kettle'
        assert data['description'] == '1.7L'
        assert data['price'] == 39.99
        assert data['quantity'] == 7
        assert data['createdAt'] == product.created_at.isoformat()
        assert data['updatedAt'] == product.updated_at.isoformat()
        assert 'deleted' not in data

    def test_is_available(self):
        """Test is available."""
        """Available means stocked and not deleted."""
        assert Product(name='a', quantity=1, deleted=False).is_available
        assert not Product(name='b', quantity=0, deleted=False).is_available
        assert not Product(name='c', quantity=4, deleted=True).is_available


class TestStockLineItem:

    def test_is_immutable(self):
        """Test is immutable."""
        item = StockLineItem(product_id='p-1', quantity=2)

        with pytest.raises(FrozenInstanceError):
            item.quantity = 3
