"""
Product Repository Implementation
"""

from typing import List, Optional
from datetime import datetime

from product_service.database import db
from product_service.models import Product
from .base import ProductRepositoryInterface


class ProductRepository(ProductRepositoryInterface):
    """SQLAlchemy-backed product store.

    Read queries only ever see non-deleted rows; lookups by id do not filter
    on ``deleted`` so callers can decide what a deleted product means to them.
    Stock workflows use :meth:`get_for_update` and own the transaction.
    """

    SORTABLE_COLUMNS = ('id', 'name', 'description', 'price', 'quantity', 'created_at', 'updated_at')

    def _active(self):
        return Product.query.filter(Product.deleted.is_(False))

    def get_by_id(self, product_id: str) -> Optional[Product]:
        """Get product by ID, deleted or not"""
        return db.session.get(Product, product_id)

    def get_for_update(self, product_id: str) -> Optional[Product]:
        """Get product by ID holding a row lock until the transaction ends"""
        return Product.query.filter_by(id=product_id).with_for_update().first()

    def create(self, product: Product) -> Product:
        """Create new product"""
        try:
            db.session.add(product)
            db.session.commit()
            return product
        except Exception:
            db.session.rollback()
            raise

    def update(self, product: Product) -> Product:
        """Persist changes made to a product"""
        try:
            product.updated_at = datetime.utcnow()
            db.session.commit()
            return product
        except Exception:
            db.session.rollback()
            raise

    def get_all_active(self) -> List[Product]:
        """Get every non-deleted product"""
        return self._active().order_by(Product.name.asc(), Product.id.asc()).all()

    def get_active_page(self, page: int, per_page: int, sort_column: str,
                        descending: bool = False) -> tuple[List[Product], int]:
        """Get one page (1-based) of non-deleted products"""
        if sort_column not in self.SORTABLE_COLUMNS:
            raise ValueError(f"Cannot sort by {sort_column}")

        column = getattr(Product, sort_column)
        order = column.desc() if descending else column.asc()
        query = self._active().order_by(order, Product.id.asc())

        pagination = query.paginate(page=page, per_page=per_page, error_out=False)
        return pagination.items, pagination.total

    def search_by_name(self, name: str) -> List[Product]:
        """Case-insensitive substring match on name; wildcards in name are literal"""
        return self._active().filter(
            Product.name.icontains(name, autoescape=True)
        ).order_by(Product.name.asc(), Product.id.asc()).all()

    def filter_by_price(self, min_price: float, max_price: float) -> List[Product]:
        """Products priced within [min_price, max_price]"""
        return self._active().filter(
            Product.price.between(min_price, max_price)
        ).order_by(Product.price.asc(), Product.id.asc()).all()

    def get_available(self) -> List[Product]:
        """Products with stock on hand"""
        return self._active().filter(
            Product.quantity > 0
        ).order_by(Product.name.asc(), Product.id.asc()).all()
