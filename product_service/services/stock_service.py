"""
Stock Service - validate, deduct and restore stock for batches of line items.

Callers drive a two-phase flow: ``validate_stock`` before payment,
``deduct_stock`` once payment is confirmed, ``restore_stock`` to compensate a
cancellation or refund. Nothing is reserved between validate and deduct;
deduct re-checks availability under a row lock and is the authoritative step.
"""

from typing import Iterable
import logging

from product_service.database import db
from product_service.models import StockLineItem
from product_service.repositories import ProductRepository
from product_service.exceptions import (
    ProductNotFoundError, ProductUnavailableError, InsufficientStockError
)
from product_service.utils.cache import invalidate_product_caches

logger = logging.getLogger(__name__)


class StockService:
    """Stock adjustment workflow over the product store"""

    def __init__(self, product_repo=None):
        self.product_repo = product_repo or ProductRepository()

    def validate_stock(self, items: Iterable[StockLineItem]) -> int:
        """
        Check that every line item can be fulfilled. Read-only.

        Raises on the first item that is missing, deleted or short on stock.

        Returns:
            Number of line items checked
        """
        items = list(items)
        logger.info(f"Validating stock for {len(items)} products")

        for item in items:
            logger.info(f"Checking stock for product={item.product_id}, requestedQuantity={item.quantity}")

            product = self.product_repo.get_by_id(item.product_id)
            if not product:
                logger.error(f"Product {item.product_id} not found")
                raise ProductNotFoundError(f"Product not found: {item.product_id}")

            if product.deleted:
                logger.error(f"Product {product.id} is deleted")
                raise ProductUnavailableError(f"Product is not available: {product.id}")

            if product.quantity < item.quantity:
                logger.error(
                    f"Insufficient stock for product {product.id}. "
                    f"Available={product.quantity}, Requested={item.quantity}"
                )
                raise InsufficientStockError(
                    f"Insufficient stock for product {product.name}. "
                    f"Available: {product.quantity}, Required: {item.quantity}",
                    product_id=product.id,
                    available=product.quantity,
                    requested=item.quantity
                )

        logger.info("Stock validation successful.")
        return len(items)

    def deduct_stock(self, items: Iterable[StockLineItem]) -> int:
        """
        Remove stock for every line item in one transaction.

        If any item is missing or short, no item's quantity changes.

        Returns:
            Number of line items applied
        """
        items = list(items)
        logger.info(f"Deducting stock for {len(items)} products")

        try:
            for item in items:
                product = self.product_repo.get_for_update(item.product_id)
                if not product:
                    logger.error(f"Product {item.product_id} not found")
                    raise ProductNotFoundError(f"Product not found: {item.product_id}")

                if product.quantity < item.quantity:
                    logger.error(
                        f"Cannot deduct stock. Insufficient stock for product {product.id}. "
                        f"Available={product.quantity}, Requested={item.quantity}"
                    )
                    raise InsufficientStockError(
                        f"Insufficient stock to deduct for product {product.name}",
                        product_id=product.id,
                        available=product.quantity,
                        requested=item.quantity
                    )

                product.quantity -= item.quantity
                db.session.flush()

                logger.info(f"Stock updated. Product={product.id}, RemainingQuantity={product.quantity}")

            db.session.commit()
        except Exception:
            db.session.rollback()
            logger.warning("Stock deduction rolled back; no quantities were changed")
            raise

        invalidate_product_caches()
        logger.info("Stock deduction completed successfully.")
        return len(items)

    def restore_stock(self, items: Iterable[StockLineItem]) -> int:
        """
        Return stock for every line item in one transaction.

        Returns:
            Number of line items applied
        """
        items = list(items)
        logger.info(f"Restoring stock for {len(items)} products")

        try:
            for item in items:
                product = self.product_repo.get_for_update(item.product_id)
                if not product:
                    logger.error(f"Product {item.product_id} not found")
                    raise ProductNotFoundError(f"Product not found: {item.product_id}")

                product.quantity += item.quantity
                db.session.flush()

                logger.info(f"Stock restored. Product={product.id}, Quantity={product.quantity}")

            db.session.commit()
        except Exception:
            db.session.rollback()
            logger.warning("Stock restore rolled back; no quantities were changed")
            raise

        invalidate_product_caches()
        logger.info("Stock restore completed successfully.")
        return len(items)
