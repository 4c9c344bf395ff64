"""
Business exceptions raised by the product and stock services
"""


class ProductServiceError(Exception):
    """Base error carrying the HTTP status and label it maps to"""
    status_code = 500
    error = 'Internal Server Error'

    def __init__(self, message):
        self.message = message
        super().__init__(self.message)

    def to_dict(self):
        return {
            'error': self.error,
            'message': self.message
        }


class ProductNotFoundError(ProductServiceError):
    status_code = 404
    error = 'Not Found'


class ProductUnavailableError(ProductServiceError):
    """Product exists but is soft-deleted"""
    status_code = 409
    error = 'Product Unavailable'


class InsufficientStockError(ProductServiceError):
    status_code = 409
    error = 'Insufficient Stock'

    def __init__(self, message, product_id=None, available=None, requested=None):
        super().__init__(message)
        self.product_id = product_id
        self.available = available
        self.requested = requested

    def to_dict(self):
        body = super().to_dict()
        body.update({
            'productId': self.product_id,
            'available': self.available,
            'requested': self.requested
        })
        return body


class InvalidArgumentError(ProductServiceError):
    status_code = 400
    error = 'Invalid Argument'
