from flask_sqlalchemy import SQLAlchemy
from datetime import datetime, timezone

db = SQLAlchemy()


def utcnow() -> datetime:
    """Naive UTC timestamp; SQLite does not keep tzinfo."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def isoformat(value):
    if value is None:
        return None
    return value.replace(microsecond=0).isoformat() + "Z"


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    firstname = db.Column(db.String(100), nullable=False)
    middlename = db.Column(db.String(100), nullable=False, default="")
    lastname = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    address = db.Column(db.String(500), nullable=False, default="")
    contact = db.Column(db.String(50), nullable=False, default="")
    role = db.Column(db.String(50), nullable=False, default="user")
    created_at = db.Column(db.DateTime, default=utcnow)

    def identity(self) -> dict:
        """Snapshot stored in the session at login."""
        return {
            "firstname": self.firstname,
            "middlename": self.middlename,
            "lastname": self.lastname,
            "email": self.email,
            "address": self.address,
            "contact": self.contact,
            "role": self.role,
        }

    def to_dict(self) -> dict:
        data = self.identity()
        data["id"] = self.id
        data["created_at"] = isoformat(self.created_at)
        return data

    def __repr__(self):
        return f"<User {self.email}>"


class Product(db.Model):
    __tablename__ = "products"
    __table_args__ = (
        db.CheckConstraint("stock >= 0", name="ck_products_stock_non_negative"),
        db.CheckConstraint("price >= 0", name="ck_products_price_non_negative"),
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False, index=True)
    price = db.Column(db.Numeric(10, 2), nullable=False)
    stock = db.Column(db.Integer, nullable=False, default=0)
    category = db.Column(db.String(100), nullable=False, default="")
    image = db.Column(db.String(500), nullable=False, default="")
    description = db.Column(db.Text, nullable=False, default="")
    created_at = db.Column(db.DateTime, default=utcnow)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "price": float(self.price),
            "stock": self.stock,
            "category": self.category,
            "image": self.image,
            "description": self.description,
            "created_at": isoformat(self.created_at),
        }

    def __repr__(self):
        return f"<Product {self.name}>"


class Order(db.Model):
    __tablename__ = "orders"
    __table_args__ = (
        db.CheckConstraint("quantity > 0", name="ck_orders_quantity_positive"),
    )

    id = db.Column(db.Integer, primary_key=True)
    # No foreign key: orders outlive the products they reference.
    product_id = db.Column(db.Integer, nullable=True, index=True)
    product = db.Column(db.String(255), nullable=False)
    price = db.Column(db.Numeric(10, 2), nullable=False)
    quantity = db.Column(db.Integer, nullable=False)
    buyer = db.Column(db.String(255), nullable=False, default="guest")
    buyer_email = db.Column(db.String(255), nullable=True, index=True)
    timestamp = db.Column(db.DateTime, nullable=False, default=utcnow)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "product_id": self.product_id,
            "product": self.product,
            "price": float(self.price),
            "quantity": self.quantity,
            "buyer": self.buyer,
            "buyerEmail": self.buyer_email,
            "timestamp": isoformat(self.timestamp),
        }


class UserSession(db.Model):
    __tablename__ = "sessions"

    token_hash = db.Column(db.String(64), primary_key=True)
    identity = db.Column(db.JSON, nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    expires_at = db.Column(db.DateTime, nullable=False, index=True)

    def is_expired(self, now=None) -> bool:
        return (now or utcnow()) >= self.expires_at
