import logging
from typing import Optional

from storefront.models.database import db, Order, Product
from storefront.services.auth_service import normalize_email
from storefront.services.catalog_service import CatalogService
from storefront.services.concurrency import run_with_retry
from storefront.services.errors import InsufficientStock, InvalidInput, NotFound

logger = logging.getLogger(__name__)


def resolve_buyer(identity: Optional[dict], buyer: Optional[str] = None) -> str:
    """Display name for an order: session user, then client-supplied name, then "guest"."""
    if identity:
        parts = (identity.get("firstname"), identity.get("middlename"), identity.get("lastname"))
        name = " ".join(p.strip() for p in parts if p and p.strip())
        if name:
            return name
    if buyer and buyer.strip():
        return buyer.strip()
    return "guest"


class OrderService:
    """Handles order placement and order administration."""

    @staticmethod
    def _validate(product_name, product_id, price, quantity) -> None:
        if product_id is None and not (product_name or "").strip():
            raise InvalidInput("Missing required fields: product")
        if price is None:
            raise InvalidInput("Missing required fields: price")
        if isinstance(price, bool) or not isinstance(price, (int, float)) or price < 0:
            raise InvalidInput("Price must be a number, zero or more")
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise InvalidInput("Quantity must be a positive integer")

    @staticmethod
    def _resolve_product(product_name, product_id) -> Product:
        if product_id is not None:
            return CatalogService.get_product(product_id)

        product = CatalogService.find_by_name(product_name.strip())
        if not product:
            raise NotFound(f"Product {product_name!r} not found")
        return product

    @staticmethod
    def place_order(
        product_name: Optional[str] = None,
        price=None,
        quantity=None,
        buyer: Optional[str] = None,
        buyer_email: Optional[str] = None,
        identity: Optional[dict] = None,
        product_id: Optional[int] = None,
    ) -> Order:
        """Check stock, decrement it and record the order in one transaction.

        The decrement is a conditional UPDATE (``stock >= quantity``), so
        concurrent orders cannot both consume the same units.
        """
        OrderService._validate(product_name, product_id, price, quantity)
        product = OrderService._resolve_product(product_name, product_id)
        pid, display_name = product.id, product.name

        buyer_name = resolve_buyer(identity, buyer)
        if identity and identity.get("email"):
            buyer_email = identity["email"]
        buyer_email = normalize_email(buyer_email) or None

        def _place() -> Order:
            decremented = Product.query.filter(
                Product.id == pid,
                Product.stock >= quantity,
            ).update({Product.stock: Product.stock - quantity}, synchronize_session=False)

            if not decremented:
                db.session.rollback()
                if db.session.get(Product, pid) is None:
                    raise NotFound(f"Product {display_name!r} not found")
                raise InsufficientStock(f"Insufficient stock for {display_name}")

            order = Order(
                product_id=pid,
                product=display_name,
                price=price,
                quantity=quantity,
                buyer=buyer_name,
                buyer_email=buyer_email,
            )
            db.session.add(order)
            db.session.commit()
            return order

        try:
            order = run_with_retry(_place)
        except InsufficientStock:
            logger.info("Rejected order for %s x%d: insufficient stock", display_name, quantity)
            raise

        logger.info("Order %s placed: %s x%d by %s", order.id, display_name, quantity, buyer_name)
        return order

    @staticmethod
    def list_orders() -> list:
        """All orders, newest first."""
        return Order.query.order_by(Order.timestamp.desc(), Order.id.desc()).all()

    @staticmethod
    def delete_order(order_id: int) -> None:
        """Delete an order. Stock is not restored."""
        order = db.session.get(Order, order_id)
        if not order:
            raise NotFound(f"Order {order_id} not found")

        db.session.delete(order)
        db.session.commit()
        logger.info("Deleted order %s", order_id)

    @staticmethod
    def order_history(email: str) -> list:
        """Orders placed under ``email``, newest first."""
        return (
            Order.query.filter_by(buyer_email=email)
            .order_by(Order.timestamp.desc(), Order.id.desc())
            .all()
        )
