from flask import Blueprint, jsonify, request
from marshmallow import EXCLUDE, Schema, fields, validate

from storefront.middleware.auth import require_admin
from storefront.middleware.error_handler import validation_failed
from storefront.services.catalog_service import CatalogService

products_bp = Blueprint("products", __name__)


class ProductSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    name = fields.String(required=True, validate=validate.Length(min=1, max=255))
    price = fields.Float(required=True, validate=validate.Range(min=0))
    stock = fields.Integer(strict=True, validate=validate.Range(min=0))
    category = fields.String(validate=validate.Length(max=100))
    image = fields.String(validate=validate.Length(max=500))
    description = fields.String()


@products_bp.route("/api/products", methods=["GET"])
def list_products():
    """Public catalog listing."""
    products = CatalogService.list_products()
    return jsonify({"success": True, "data": [p.to_dict() for p in products]})


@products_bp.route("/api/products/<int:product_id>", methods=["GET"])
def get_product(product_id):
    product = CatalogService.get_product(product_id)
    return jsonify({"success": True, "data": product.to_dict()})


@products_bp.route("/admin/products", methods=["POST"])
@require_admin
def create_product():
    """Create a product (admin only)."""
    schema = ProductSchema()
    payload = request.get_json(silent=True) or {}
    errors = schema.validate(payload)
    if errors:
        return validation_failed(errors)

    product = CatalogService.create_product(schema.load(payload))
    return jsonify({"success": True, "product": product.to_dict()}), 201


@products_bp.route("/admin/products/<int:product_id>", methods=["PUT"])
@require_admin
def update_product(product_id):
    """Merge the supplied fields into a product (admin only)."""
    schema = ProductSchema()
    payload = request.get_json(silent=True) or {}
    errors = schema.validate(payload, partial=True)
    if errors:
        return validation_failed(errors)

    product = CatalogService.update_product(product_id, schema.load(payload, partial=True))
    return jsonify({"success": True, "product": product.to_dict()})


@products_bp.route("/admin/products/<int:product_id>", methods=["DELETE"])
@require_admin
def delete_product(product_id):
    """Delete a product (admin only). Existing orders are kept."""
    CatalogService.delete_product(product_id)
    return jsonify({"success": True})
