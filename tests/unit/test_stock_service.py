from unittest.mock import patch

import pytest

from product_service.models import Product, StockLineItem
from product_service.services import StockService
from product_service.exceptions import (
    ProductNotFoundError, ProductUnavailableError, InsufficientStockError
)


def quantity_of(db_session, product_id):
    db_session.expire_all()
    return db_session.get(Product, product_id).quantity


class TestValidateStock:
    """Read-only availability checks"""

    def test_validate_returns_item_count(self, make_product):
        """Test validate returns item count."""
        first = make_product(quantity=5)
        second = make_product(quantity=1)

        count = StockService().validate_stock([
            StockLineItem(first.id, 5),
            StockLineItem(second.id, 1),
        ])

        assert count == 2

    def test_validate_does_not_change_quantities(self, make_product, db_session):
        """Test validate does not change quantities."""
        product = make_product(quantity=5)

        StockService().validate_stock([StockLineItem(product.id, 3)])

        assert quantity_of(db_session, product.id) == 5

    def test_validate_unknown_product(self, db_session):
        """Test validate unknown product."""
        with pytest.raises(ProductNotFoundError, match='Product not found: missing'):
            StockService().validate_stock([StockLineItem('missing', 1)])

    def test_validate_deleted_product(self, make_product):
        """Test validate deleted product."""
        product = make_product(quantity=50, deleted=True)

        with pytest.raises(ProductUnavailableError) as exc_info:
            StockService().validate_stock([StockLineItem(product.id, 1)])

        assert exc_info.value.message == f'Product is not available: {product.id}'
        assert exc_info.value.status_code == 409

    def test_validate_insufficient_stock(self, make_product):
        """Test validate insufficient stock."""
        product = make_product(name='Desk', quantity=2)

        with pytest.raises(InsufficientStockError) as exc_info:
            StockService().validate_stock([StockLineItem(product.id, 3)])

        error = exc_info.value
        assert error.product_id == product.id
        assert error.available == 2
        assert error.requested == 3
        assert 'Desk' in error.message

    def test_validate_reports_first_failure_in_order(self, make_product):
        """Test validate reports first failure in order."""
        short = make_product(quantity=0)

        with pytest.raises(InsufficientStockError):
            StockService().validate_stock([
                StockLineItem(short.id, 1),
                StockLineItem('missing', 1),
            ])

    def test_validate_empty_batch(self, db_session):
        """Test validate empty batch."""
        assert StockService().validate_stock([]) == 0


class TestDeductStock:
    """Atomic batch deduction"""

    def test_deduct_single_item(self, make_product, db_session):
        """Test deduct single item."""
        product = make_product(quantity=5)

        assert StockService().deduct_stock([StockLineItem(product.id, 3)]) == 1
        assert quantity_of(db_session, product.id) == 2

    def test_deduct_then_fail_then_restore(self, make_product, db_session):
        """Test deduct then fail then restore."""
        product = make_product(quantity=5)
        service = StockService()

        service.deduct_stock([StockLineItem(product.id, 3)])
        with pytest.raises(InsufficientStockError):
            service.deduct_stock([StockLineItem(product.id, 3)])
        assert quantity_of(db_session, product.id) == 2

        service.restore_stock([StockLineItem(product.id, 10)])
        assert quantity_of(db_session, product.id) == 12

    def test_deduct_to_zero(self, make_product, db_session):
        """Test deduct to zero."""
        product = make_product(quantity=4)

        StockService().deduct_stock([StockLineItem(product.id, 4)])

        assert quantity_of(db_session, product.id) == 0

    def test_deduct_batch_is_all_or_nothing(self, make_product, db_session):
        """Test deduct batch is all or nothing."""
        plenty = make_product(quantity=10)
        scarce = make_product(quantity=1)

        with pytest.raises(InsufficientStockError):
            StockService().deduct_stock([
                StockLineItem(plenty.id, 4),
                StockLineItem(scarce.id, 2),
            ])

        assert quantity_of(db_session, plenty.id) == 10
        assert quantity_of(db_session, scarce.id) == 1

    def test_deduct_unknown_product_rolls_back_batch(self, make_product, db_session):
        """Test deduct unknown product rolls back batch."""
        product = make_product(quantity=10)

        with pytest.raises(ProductNotFoundError, match='Product not found: missing'):
            StockService().deduct_stock([
                StockLineItem(product.id, 4),
                StockLineItem('missing', 1),
            ])

        assert quantity_of(db_session, product.id) == 10

    def test_deduct_repeated_product_is_cumulative(self, make_product, db_session):
        """Test deduct repeated product is cumulative."""
        product = make_product(quantity=5)

        with pytest.raises(InsufficientStockError) as exc_info:
            StockService().deduct_stock([
                StockLineItem(product.id, 3),
                StockLineItem(product.id, 3),
            ])

        assert exc_info.value.available == 2
        assert quantity_of(db_session, product.id) == 5

    def test_deduct_ignores_deleted_flag(self, make_product, db_session):
        """Test deduct ignores deleted flag."""
        product = make_product(quantity=5, deleted=True)

        StockService().deduct_stock([StockLineItem(product.id, 2)])

        assert quantity_of(db_session, product.id) == 3

    @patch('product_service.utils.cache.redis_client')
    def test_deduct_flushes_cache_only_on_success(self, mock_redis, make_product):
        """Test deduct flushes cache only on success."""
        mock_redis.keys.return_value = ['products:available']
        product = make_product(quantity=1)
        service = StockService()

        with pytest.raises(InsufficientStockError):
            service.deduct_stock([StockLineItem(product.id, 2)])
        mock_redis.keys.assert_not_called()

        service.deduct_stock([StockLineItem(product.id, 1)])
        mock_redis.keys.assert_called_once_with('products:*')
        mock_redis.delete.assert_called_once_with('products:available')


class TestRestoreStock:
    """Atomic batch restoration"""

    def test_restore_batch(self, make_product, db_session):
        """Test restore batch."""
        first = make_product(quantity=0)
        second = make_product(quantity=7)

        count = StockService().restore_stock([
            StockLineItem(first.id, 2),
            StockLineItem(second.id, 3),
        ])

        assert count == 2
        assert quantity_of(db_session, first.id) == 2
        assert quantity_of(db_session, second.id) == 10

    def test_restore_unknown_product_rolls_back_batch(self, make_product, db_session):
        """Test restore unknown product rolls back batch."""
        product = make_product(quantity=1)

        with pytest.raises(ProductNotFoundError):
            StockService().restore_stock([
                StockLineItem(product.id, 5),
                StockLineItem('missing', 1),
            ])

        assert quantity_of(db_session, product.id) == 1

    def test_restore_deleted_product(self, make_product, db_session):
        """Test restore deleted product."""
        product = make_product(quantity=0, deleted=True)

        StockService().restore_stock([StockLineItem(product.id, 4)])

        assert quantity_of(db_session, product.id) == 4
