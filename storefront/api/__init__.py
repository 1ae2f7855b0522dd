from storefront.api.auth import auth_bp
from storefront.api.products import products_bp
from storefront.api.orders import orders_bp
from storefront.api.admin import admin_bp

__all__ = ["auth_bp", "products_bp", "orders_bp", "admin_bp"]
