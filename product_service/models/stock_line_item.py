"""
Stock line item shared by the validate/deduct/restore requests
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class StockLineItem:
    product_id: str
    quantity: int
