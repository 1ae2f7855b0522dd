import logging
from typing import Optional

from storefront.models.database import db, Product
from storefront.services.errors import InvalidInput, NotFound

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("name", "price", "stock", "category", "image", "description")


class CatalogService:
    """Product CRUD. Mutations are gated by ``require_admin`` at the route."""

    @staticmethod
    def _check(fields: dict) -> None:
        unknown = set(fields) - set(EDITABLE_FIELDS)
        if unknown:
            raise InvalidInput(f"Unknown product fields: {', '.join(sorted(unknown))}")
        if "name" in fields and not (fields["name"] or "").strip():
            raise InvalidInput("Product name must not be empty")
        if "price" in fields and (fields["price"] is None or fields["price"] < 0):
            raise InvalidInput("Price must be zero or more")
        if "stock" in fields and (fields["stock"] is None or fields["stock"] < 0):
            raise InvalidInput("Stock must be zero or more")

    @staticmethod
    def list_products() -> list:
        return Product.query.order_by(Product.id).all()

    @staticmethod
    def get_product(product_id: int) -> Product:
        product = db.session.get(Product, product_id)
        if not product:
            raise NotFound(f"Product {product_id} not found")
        return product

    @staticmethod
    def find_by_name(name: str) -> Optional[Product]:
        """First product with this exact name; lowest id wins among duplicates."""
        return Product.query.filter_by(name=name).order_by(Product.id).first()

    @staticmethod
    def create_product(fields: dict) -> Product:
        if "name" not in fields or "price" not in fields:
            raise InvalidInput("name and price are required")
        CatalogService._check(fields)

        product = Product(**fields)
        db.session.add(product)
        db.session.commit()
        logger.info("Created product %s (%s)", product.id, product.name)
        return product

    @staticmethod
    def update_product(product_id: int, fields: dict) -> Product:
        """Merge ``fields`` into the product; omitted fields keep their values."""
        CatalogService._check(fields)
        product = CatalogService.get_product(product_id)

        for key, value in fields.items():
            setattr(product, key, value)
        db.session.commit()
        logger.info("Updated product %s: %s", product_id, ", ".join(sorted(fields)) or "no changes")
        return product

    @staticmethod
    def delete_product(product_id: int) -> None:
        """Delete unconditionally; orders referencing the product are untouched."""
        product = CatalogService.get_product(product_id)
        db.session.delete(product)
        db.session.commit()
        logger.info("Deleted product %s", product_id)
