"""
Repositories package - Data access layer for product service
"""

from .base import ProductRepositoryInterface
from .product_repository import ProductRepository

__all__ = [
    'ProductRepositoryInterface',
    'ProductRepository'
]
