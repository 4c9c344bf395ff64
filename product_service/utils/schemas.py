from marshmallow import Schema, fields, validate, post_load, ValidationError, EXCLUDE

from product_service.models import StockLineItem, NAME_MAX_LENGTH


def not_blank(value):
    if value is not None and not value.strip():
        raise ValidationError('Must not be blank.')


class ProductRequestSchema(Schema):
    """Schema for creating or fully replacing a product"""

    class Meta:
        unknown = EXCLUDE

    name = fields.String(required=True, validate=[validate.Length(min=1, max=NAME_MAX_LENGTH), not_blank])
    description = fields.String(allow_none=True, load_default=None)
    price = fields.Float(required=True, validate=validate.Range(min=0, min_inclusive=False))
    quantity = fields.Integer(required=True, strict=True, validate=validate.Range(min=0))


class ProductPatchSchema(Schema):
    """Schema for partial updates.

    Only types are checked here; per-field rules are applied by the service so
    that a bad value and an empty patch both surface as invalid arguments.
    """

    class Meta:
        unknown = EXCLUDE

    name = fields.String(allow_none=True)
    description = fields.String(allow_none=True)
    price = fields.Float(allow_none=True)
    quantity = fields.Integer(allow_none=True, strict=True)


class StockLineItemSchema(Schema):
    """Schema for one {productId, quantity} entry of a stock request"""

    class Meta:
        unknown = EXCLUDE

    product_id = fields.String(required=True, data_key='productId', validate=validate.Length(min=1))
    quantity = fields.Integer(required=True, strict=True, validate=validate.Range(min=1))

    @post_load
    def make_line_item(self, data, **kwargs):
        return StockLineItem(**data)


class PageQuerySchema(Schema):
    """Schema for paged listing query parameters"""

    class Meta:
        unknown = EXCLUDE

    page = fields.Integer(validate=validate.Range(min=0), load_default=0)
    size = fields.Integer(validate=validate.Range(min=1))
    sort_by = fields.String(data_key='sortBy', load_default='name')
    sort_dir = fields.String(data_key='sortDir', load_default='asc')


class SearchQuerySchema(Schema):
    """Schema for name search query parameters"""

    class Meta:
        unknown = EXCLUDE

    name = fields.String(required=True)


class PriceFilterQuerySchema(Schema):
    """Schema for price range query parameters"""

    class Meta:
        unknown = EXCLUDE

    min = fields.Float(required=True)
    max = fields.Float(required=True)
