"""
Services package - Business logic for product service
"""

from .product_service import ProductService
from .stock_service import StockService

__all__ = ['ProductService', 'StockService']
