from flask import Blueprint, jsonify

from storefront.middleware.auth import require_admin
from storefront.models.database import Order, Product, User
from storefront.services.auth_service import AuthService

admin_bp = Blueprint("admin", __name__, url_prefix="/api")


@admin_bp.route("/users", methods=["GET"])
@require_admin
def list_users():
    """List all users (admin only). Password hashes are never included."""
    users = AuthService.list_users()
    return jsonify({"success": True, "data": [u.to_dict() for u in users]})


@admin_bp.route("/admin/stats", methods=["GET"])
@require_admin
def get_stats():
    """Get store statistics (admin only)."""
    return jsonify({
        "success": True,
        "data": {
            "users": User.query.count(),
            "products": Product.query.count(),
            "orders": Order.query.count(),
            "out_of_stock": Product.query.filter(Product.stock == 0).count(),
        },
    })
