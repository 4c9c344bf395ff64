"""
Models package - Database models for product service
"""

from product_service.database import db

from .product import Product, NAME_MAX_LENGTH
from .stock_line_item import StockLineItem

__all__ = [
    'db',
    'Product',
    'NAME_MAX_LENGTH',
    'StockLineItem'
]
