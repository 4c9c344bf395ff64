"""
Controllers package initialization
"""

from product_service.api.controllers.products import products_bp
from product_service.api.controllers.health import health_bp

__all__ = ['products_bp', 'health_bp']
