"""
Product Model
"""

import uuid
from datetime import datetime

from sqlalchemy import false

from product_service.database import db

NAME_MAX_LENGTH = 255


class Product(db.Model):
    """Catalog product with its on-hand stock quantity"""
    __tablename__ = 'products'

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = db.Column(db.String(NAME_MAX_LENGTH), nullable=False, index=True)
    description = db.Column(db.Text, nullable=True)
    price = db.Column(db.Float, nullable=True)
    quantity = db.Column(db.Integer, default=0, nullable=False)
    deleted = db.Column(db.Boolean, default=False, server_default=false(), nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f'<Product {self.id} {self.name}>'

    @property
    def is_available(self):
        """In stock and not soft-deleted"""
        return not self.deleted and self.quantity > 0

    def to_dict(self):
        """Convert to the public product representation"""
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'price': self.price,
            'quantity': self.quantity,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None
        }
