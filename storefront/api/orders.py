from flask import Blueprint, g, jsonify, request
from marshmallow import EXCLUDE, Schema, ValidationError, fields, validate, validates_schema

from storefront.middleware.auth import require_admin, require_login
from storefront.middleware.error_handler import validation_failed
from storefront.services.order_service import OrderService

orders_bp = Blueprint("orders", __name__, url_prefix="/api")


class PlaceOrderSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    product = fields.String(validate=validate.Length(max=255))
    product_id = fields.Integer(strict=True)
    price = fields.Float(required=True, validate=validate.Range(min=0))
    quantity = fields.Integer(required=True, strict=True, validate=validate.Range(min=1))
    buyer = fields.String(validate=validate.Length(max=255))
    buyer_email = fields.Email(data_key="buyerEmail")

    @validates_schema
    def check_product_reference(self, data, **kwargs):
        if data.get("product_id") is None and not (data.get("product") or "").strip():
            raise ValidationError("Missing required field.", "product")


@orders_bp.route("/order", methods=["POST"])
def place_order():
    """Place an order as a guest or as the logged-in user."""
    schema = PlaceOrderSchema()
    payload = request.get_json(silent=True) or {}
    errors = schema.validate(payload)
    if errors:
        return validation_failed(errors)

    data = schema.load(payload)
    order = OrderService.place_order(
        product_name=data.get("product"),
        product_id=data.get("product_id"),
        price=data["price"],
        quantity=data["quantity"],
        buyer=data.get("buyer"),
        buyer_email=data.get("buyer_email"),
        identity=g.get("identity"),
    )
    return jsonify({
        "success": True,
        "message": "Order placed successfully!",
        "order": order.to_dict(),
    }), 201


@orders_bp.route("/orders", methods=["GET"])
@require_admin
def list_orders():
    """List every order (admin only)."""
    orders = OrderService.list_orders()
    return jsonify({"success": True, "data": [o.to_dict() for o in orders]})


@orders_bp.route("/orders/<int:order_id>", methods=["DELETE"])
@require_admin
def delete_order(order_id):
    """Delete an order (admin only). Inventory is not re-credited."""
    OrderService.delete_order(order_id)
    return jsonify({"success": True})


@orders_bp.route("/orders/history", methods=["GET"])
@require_login
def order_history():
    """Orders placed by the logged-in user."""
    orders = OrderService.order_history(g.identity["email"])
    return jsonify({"success": True, "data": [o.to_dict() for o in orders]})
