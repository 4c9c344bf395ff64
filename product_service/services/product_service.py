"""
Product Service - Catalog CRUD and read-only product views
"""

from typing import List, Dict, Any
import logging

from flask import current_app

from product_service.models import Product, NAME_MAX_LENGTH
from product_service.repositories import ProductRepository
from product_service.exceptions import ProductNotFoundError, InvalidArgumentError
from product_service.utils.cache import (
    cache_key, get_from_cache, set_cache, get_redis, invalidate_product_caches
)

logger = logging.getLogger(__name__)

# Public sort names accepted by the paged listing, mapped to model columns
SORT_FIELDS = {
    'id': 'id',
    'name': 'name',
    'description': 'description',
    'price': 'price',
    'quantity': 'quantity',
    'createdAt': 'created_at',
    'created_at': 'created_at',
    'updatedAt': 'updated_at',
    'updated_at': 'updated_at',
}


class ProductService:
    """Business logic for the product catalog"""

    def __init__(self, product_repo=None):
        self.product_repo = product_repo or ProductRepository()

    # =========================================================================
    # Mutations
    # =========================================================================

    def create_product(self, **kwargs) -> Dict[str, Any]:
        """Create a new product"""
        logger.info(f"Creating product with name={kwargs.get('name')}")

        product = Product(
            name=kwargs['name'],
            description=kwargs.get('description'),
            price=kwargs['price'],
            quantity=kwargs['quantity']
        )
        created = self.product_repo.create(product)
        invalidate_product_caches()

        logger.info(f"Product created successfully with id={created.id}")
        return created.to_dict()

    def update_product(self, product_id: str, **kwargs) -> Dict[str, Any]:
        """Replace every mutable field of a product"""
        logger.info(f"Updating product with id={product_id}")

        product = self._get_or_404(product_id)
        product.name = kwargs['name']
        product.description = kwargs.get('description')
        product.price = kwargs['price']
        product.quantity = kwargs['quantity']

        updated = self.product_repo.update(product)
        invalidate_product_caches()

        logger.info(f"Product updated successfully: id={product_id}")
        return updated.to_dict()

    def patch_product(self, product_id: str, **kwargs) -> Dict[str, Any]:
        """Apply the provided fields only.

        Every provided field is checked before any is applied, so one bad
        value leaves the product untouched.
        """
        logger.info(f"Partial update (PATCH) for product id={product_id}")

        product = self._get_or_404(product_id)
        changes = self._validate_patch(kwargs)

        for field, value in changes.items():
            setattr(product, field, value)

        patched = self.product_repo.update(product)
        invalidate_product_caches()

        logger.info(f"Product patched successfully: id={product_id} fields={sorted(changes)}")
        return patched.to_dict()

    def soft_delete_product(self, product_id: str) -> Dict[str, Any]:
        """Flag a product as deleted"""
        logger.info(f"Soft deleting product with id={product_id}")

        product = self._get_or_404(product_id)
        product.deleted = True
        self.product_repo.update(product)
        invalidate_product_caches()

        logger.info(f"Product soft deleted: id={product_id}")
        return {
            'message': 'Product deleted successfully',
            'id': product_id
        }

    # =========================================================================
    # Reads
    # =========================================================================

    def get_product(self, product_id: str) -> Dict[str, Any]:
        """Get a non-deleted product by ID"""
        key = cache_key('by_id', product_id)
        cached = get_from_cache(key, get_redis())
        if cached is not None:
            return cached

        logger.info(f"Fetching product with id={product_id}")
        product = self.product_repo.get_by_id(product_id)
        if not product:
            logger.error(f"Product with id={product_id} not found")
            raise ProductNotFoundError('Product not found')

        if product.deleted:
            logger.warning(f"Product with id={product_id} is deleted")
            raise ProductNotFoundError('Product not available')

        result = product.to_dict()
        self._cache(key, result)
        return result

    def get_all_products(self) -> List[Dict[str, Any]]:
        """Get every non-deleted product"""
        logger.info("Fetching all active (non-deleted) products")
        products = [product.to_dict() for product in self.product_repo.get_all_active()]
        logger.info(f"Fetched {len(products)} products")
        return products

    def get_products_page(self, page: int = 0, size: int = None, sort_by: str = 'name',
                          sort_dir: str = 'asc') -> Dict[str, Any]:
        """Get one zero-based page of non-deleted products"""
        if size is None:
            size = current_app.config['DEFAULT_PAGE_SIZE']
        max_size = current_app.config['MAX_PAGE_SIZE']
        if size > max_size:
            raise InvalidArgumentError(f"Page size cannot exceed {max_size}")

        sort_column = SORT_FIELDS.get(sort_by)
        if not sort_column:
            raise InvalidArgumentError(f"Cannot sort by '{sort_by}'")
        descending = sort_dir.lower() == 'desc'
        direction = 'desc' if descending else 'asc'

        key = cache_key('page', page, size, sort_column, direction)
        cached = get_from_cache(key, get_redis())
        if cached is not None:
            return cached

        items, total = self.product_repo.get_active_page(
            page=page + 1, per_page=size, sort_column=sort_column, descending=descending
        )
        total_pages = (total + size - 1) // size

        result = {
            'content': [product.to_dict() for product in items],
            'page': page,
            'size': size,
            'totalElements': total,
            'totalPages': total_pages,
            'last': page + 1 >= total_pages
        }
        self._cache(key, result)
        return result

    def search_by_name(self, name: str) -> List[Dict[str, Any]]:
        """Case-insensitive name search over non-deleted products"""
        key = cache_key('search', name.lower())
        cached = get_from_cache(key, get_redis())
        if cached is not None:
            return cached

        logger.info(f"Searching products by name containing '{name}'")
        results = [product.to_dict() for product in self.product_repo.search_by_name(name)]
        logger.info(f"Found {len(results)} products matching name '{name}'")

        self._cache(key, results)
        return results

    def filter_by_price(self, min_price: float, max_price: float) -> List[Dict[str, Any]]:
        """Non-deleted products priced within an inclusive range"""
        if min_price > max_price:
            raise InvalidArgumentError('Minimum price cannot be greater than maximum price')

        key = cache_key('price', min_price, max_price)
        cached = get_from_cache(key, get_redis())
        if cached is not None:
            return cached

        logger.info(f"Filtering products by price range {min_price} - {max_price}")
        results = [product.to_dict() for product in self.product_repo.filter_by_price(min_price, max_price)]
        logger.info(f"Found {len(results)} products in price range {min_price} - {max_price}")

        self._cache(key, results)
        return results

    def filter_available(self) -> List[Dict[str, Any]]:
        """Non-deleted products with quantity > 0"""
        key = cache_key('available')
        cached = get_from_cache(key, get_redis())
        if cached is not None:
            return cached

        logger.info("Fetching only available products (quantity > 0)")
        results = [product.to_dict() for product in self.product_repo.get_available()]
        logger.info(f"Found {len(results)} available products")

        self._cache(key, results)
        return results

    # =========================================================================
    # Helpers
    # =========================================================================

    def _get_or_404(self, product_id: str) -> Product:
        product = self.product_repo.get_by_id(product_id)
        if not product:
            logger.error(f"Product with id={product_id} not found")
            raise ProductNotFoundError('Product not found')
        return product

    @staticmethod
    def _validate_patch(fields: Dict[str, Any]) -> Dict[str, Any]:
        changes = {}

        name = fields.get('name')
        if name is not None:
            if not name.strip():
                raise InvalidArgumentError('Name cannot be blank')
            if len(name) > NAME_MAX_LENGTH:
                raise InvalidArgumentError(f'Name cannot exceed {NAME_MAX_LENGTH} characters')
            changes['name'] = name

        description = fields.get('description')
        if description is not None:
            if not description.strip():
                raise InvalidArgumentError('Description cannot be blank')
            changes['description'] = description

        price = fields.get('price')
        if price is not None:
            if price <= 0:
                raise InvalidArgumentError('Price must be greater than 0')
            changes['price'] = price

        quantity = fields.get('quantity')
        if quantity is not None:
            if quantity < 0:
                raise InvalidArgumentError('Quantity cannot be negative')
            changes['quantity'] = quantity

        if not changes:
            raise InvalidArgumentError('No valid fields provided to update')

        return changes

    @staticmethod
    def _cache(key: str, data: Any):
        set_cache(key, data, current_app.config['CACHE_TTL_SECONDS'], get_redis())
