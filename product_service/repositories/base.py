"""
Base Repository Interface - Abstract base classes
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from product_service.models import Product


class ProductRepositoryInterface(ABC):
    """Abstract base class for product repository"""

    @abstractmethod
    def get_by_id(self, product_id: str) -> Optional[Product]:
        pass

    @abstractmethod
    def get_for_update(self, product_id: str) -> Optional[Product]:
        pass

    @abstractmethod
    def create(self, product: Product) -> Product:
        pass

    @abstractmethod
    def update(self, product: Product) -> Product:
        pass

    @abstractmethod
    def get_all_active(self) -> List[Product]:
        pass

    @abstractmethod
    def get_active_page(self, page: int, per_page: int, sort_column: str,
                        descending: bool = False) -> tuple[List[Product], int]:
        pass

    @abstractmethod
    def search_by_name(self, name: str) -> List[Product]:
        pass

    @abstractmethod
    def filter_by_price(self, min_price: float, max_price: float) -> List[Product]:
        pass

    @abstractmethod
    def get_available(self) -> List[Product]:
        pass
