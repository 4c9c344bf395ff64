"""
Products Controller - Catalog CRUD, catalog queries and stock workflow endpoints
"""

from flask import Blueprint, request
from flask_restx import Api, Resource, fields
from marshmallow import ValidationError
import logging

from product_service.services import ProductService, StockService
from product_service.exceptions import ProductServiceError
from product_service.middlewares.auth import require_admin, require_roles, get_current_user, ALL_ROLES
from product_service.utils.error_handlers import validation_error_body, service_error_response
from product_service.utils.schemas import (
    ProductRequestSchema, ProductPatchSchema, StockLineItemSchema,
    PageQuerySchema, SearchQuerySchema, PriceFilterQuerySchema
)

logger = logging.getLogger(__name__)

# Create blueprint
products_bp = Blueprint('products', __name__)
api = Api(products_bp, version='1.0', title='Product Service API',
          description='Product catalog and inventory endpoints', doc='/docs/')

products_ns = api.namespace('products', description='Product operations')

# Initialize schemas
product_request_schema = ProductRequestSchema()
product_patch_schema = ProductPatchSchema()
stock_items_schema = StockLineItemSchema(many=True)
page_query_schema = PageQuerySchema()
search_query_schema = SearchQuerySchema()
price_filter_schema = PriceFilterQuerySchema()


product_model = api.model('Product', {
    'id': fields.String(readonly=True, description='Product identifier (UUID)'),
    'name': fields.String(required=True, description='Product name'),
    'description': fields.String(description='Product description'),
    'price': fields.Float(required=True, description='Unit price, greater than 0'),
    'quantity': fields.Integer(required=True, description='Stock on hand, 0 or more'),
    'createdAt': fields.DateTime(readonly=True, description='Creation timestamp'),
    'updatedAt': fields.DateTime(readonly=True, description='Last update timestamp')
})

stock_line_item_model = api.model('StockLineItem', {
    'productId': fields.String(required=True, description='Product identifier'),
    'quantity': fields.Integer(required=True, description='Requested quantity, 1 or more')
})


def _error(e, action):
    """Translate an exception raised while performing action"""
    if isinstance(e, ValidationError):
        return validation_error_body(e), 400
    if isinstance(e, ProductServiceError):
        return service_error_response(e)
    logger.error(f"Error {action}: {e}", exc_info=True)
    return {'error': 'Internal server error'}, 500


@products_ns.route('')
class ProductList(Resource):
    @api.doc('list_products')
    @require_roles(*ALL_ROLES)
    def get(self):
        """List all non-deleted products"""
        try:
            return ProductService().get_all_products(), 200
        except Exception as e:
            return _error(e, 'listing products')

    @api.doc('create_product')
    @api.expect(product_model)
    @require_admin
    def post(self):
        """Create new product"""
        try:
            data = product_request_schema.load(request.get_json(silent=True))
            return ProductService().create_product(**data), 201
        except Exception as e:
            return _error(e, 'creating product')


@products_ns.route('/page')
class ProductPage(Resource):
    @api.doc('page_products', params={
        'page': 'Zero-based page number', 'size': 'Page size',
        'sortBy': 'Sort field', 'sortDir': 'asc or desc'
    })
    @require_roles(*ALL_ROLES)
    def get(self):
        """Get one page of products"""
        try:
            params = page_query_schema.load(request.args.to_dict())
            return ProductService().get_products_page(**params), 200
        except Exception as e:
            return _error(e, 'paging products')


@products_ns.route('/search')
class ProductSearch(Resource):
    @api.doc('search_products', params={'name': 'Substring of the product name'})
    @require_roles(*ALL_ROLES)
    def get(self):
        """Search products by name, case-insensitively"""
        try:
            params = search_query_schema.load(request.args.to_dict())
            return ProductService().search_by_name(params['name']), 200
        except Exception as e:
            return _error(e, 'searching products')


@products_ns.route('/filter/price')
class ProductPriceFilter(Resource):
    @api.doc('filter_products_by_price', params={'min': 'Minimum price', 'max': 'Maximum price'})
    @require_roles(*ALL_ROLES)
    def get(self):
        """Products priced within [min, max]"""
        try:
            params = price_filter_schema.load(request.args.to_dict())
            return ProductService().filter_by_price(params['min'], params['max']), 200
        except Exception as e:
            return _error(e, 'filtering products by price')


@products_ns.route('/filter/available')
class ProductAvailability(Resource):
    @api.doc('filter_available_products')
    @require_roles(*ALL_ROLES)
    def get(self):
        """Products with stock on hand"""
        try:
            return ProductService().filter_available(), 200
        except Exception as e:
            return _error(e, 'filtering available products')


@products_ns.route('/validate-stock')
class ValidateStock(Resource):
    @api.doc('validate_stock')
    @api.expect([stock_line_item_model])
    @require_roles(*ALL_ROLES)
    def post(self):
        """Check that every line item can be fulfilled"""
        try:
            items = stock_items_schema.load(request.get_json(silent=True))
            checked = StockService().validate_stock(items)
            return {'message': 'Stock available', 'items': checked}, 200
        except Exception as e:
            return _error(e, 'validating stock')


@products_ns.route('/deduct-stock')
class DeductStock(Resource):
    @api.doc('deduct_stock')
    @api.expect([stock_line_item_model])
    @require_roles(*ALL_ROLES)
    def post(self):
        """Deduct stock for every line item, all or nothing"""
        try:
            items = stock_items_schema.load(request.get_json(silent=True))
            logger.info(f"Stock deduction requested by user {get_current_user()['id']}")
            applied = StockService().deduct_stock(items)
            return {'message': 'Stock deducted', 'items': applied}, 200
        except Exception as e:
            return _error(e, 'deducting stock')


@products_ns.route('/restore-stock')
class RestoreStock(Resource):
    @api.doc('restore_stock')
    @api.expect([stock_line_item_model])
    @require_roles(*ALL_ROLES)
    def post(self):
        """Restore stock for every line item, all or nothing"""
        try:
            items = stock_items_schema.load(request.get_json(silent=True))
            logger.info(f"Stock restore requested by user {get_current_user()['id']}")
            applied = StockService().restore_stock(items)
            return {'message': 'Stock restored', 'items': applied}, 200
        except Exception as e:
            return _error(e, 'restoring stock')


@products_ns.route('/<string:product_id>')
class ProductItem(Resource):
    @api.doc('get_product')
    @require_roles(*ALL_ROLES)
    def get(self, product_id):
        """Get product by ID"""
        try:
            return ProductService().get_product(product_id), 200
        except Exception as e:
            return _error(e, f'getting product {product_id}')

    @api.doc('update_product')
    @api.expect(product_model)
    @require_admin
    def put(self, product_id):
        """Replace every field of a product"""
        try:
            data = product_request_schema.load(request.get_json(silent=True))
            return ProductService().update_product(product_id, **data), 200
        except Exception as e:
            return _error(e, f'updating product {product_id}')

    @api.doc('patch_product')
    @api.expect(product_model)
    @require_admin
    def patch(self, product_id):
        """Update only the provided fields of a product"""
        try:
            data = product_patch_schema.load(request.get_json(silent=True))
            return ProductService().patch_product(product_id, **data), 200
        except Exception as e:
            return _error(e, f'patching product {product_id}')

    @api.doc('delete_product')
    @require_admin
    def delete(self, product_id):
        """Soft delete a product"""
        try:
            return ProductService().soft_delete_product(product_id), 200
        except Exception as e:
            return _error(e, f'deleting product {product_id}')
