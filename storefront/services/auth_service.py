import logging

import bcrypt
from flask import current_app
from sqlalchemy.exc import IntegrityError

from storefront.models.database import db, User
from storefront.services.concurrency import run_with_retry
from storefront.services.errors import DuplicateEmail, InvalidCredentials, InvalidInput, NotFound

logger = logging.getLogger(__name__)

ROLES = ("user", "admin")

# bcrypt only looks at the first 72 bytes and newer releases refuse longer input.
MAX_PASSWORD_BYTES = 72


def normalize_email(email) -> str:
    return (email or "").strip().lower()


class AuthService:
    """Handles registration, credential checks and password hashing."""

    @staticmethod
    def hash_password(password: str) -> str:
        """Hash a password using bcrypt."""
        salt = bcrypt.gensalt(rounds=current_app.config["BCRYPT_ROUNDS"])
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    @staticmethod
    def verify_password(password: str, password_hash: str) -> bool:
        """Verify a password against its hash."""
        if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            return False
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))

    @staticmethod
    def register_user(
        firstname: str,
        lastname: str,
        email: str,
        password: str,
        middlename: str = "",
        address: str = "",
        contact: str = "",
        role: str = "user",
    ) -> User:
        """Register a new user; the password is stored only as a bcrypt hash."""
        email = normalize_email(email)
        if not email or not password or not (firstname or "").strip() or not (lastname or "").strip():
            raise InvalidInput("firstname, lastname, email and password are required")
        if role not in ROLES:
            raise InvalidInput(f"Unknown role: {role}")
        if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise InvalidInput(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")

        if User.query.filter_by(email=email).first():
            raise DuplicateEmail()

        user = User(
            firstname=firstname.strip(),
            middlename=(middlename or "").strip(),
            lastname=lastname.strip(),
            email=email,
            password_hash=AuthService.hash_password(password),
            address=address or "",
            contact=contact or "",
            role=role,
        )

        def _insert():
            db.session.add(user)
            db.session.commit()

        try:
            run_with_retry(_insert)
        except IntegrityError:
            # Lost a race with a concurrent registration of the same email.
            db.session.rollback()
            raise DuplicateEmail()
        logger.info("Registered %s with role %s", email, role)
        return user

    @staticmethod
    def authenticate(email: str, password: str) -> User:
        """Return the user for valid credentials.

        Unknown email and wrong password raise the same error.
        """
        user = User.query.filter_by(email=normalize_email(email)).first()
        if not user or not password or not AuthService.verify_password(password, user.password_hash):
            logger.info("Failed login for %s", normalize_email(email))
            raise InvalidCredentials()

        logger.info("Login for %s", user.email)
        return user

    @staticmethod
    def set_role(email: str, role: str) -> User:
        """Change a user's role; used by the ``promote-user`` command."""
        if role not in ROLES:
            raise InvalidInput(f"Unknown role: {role}")

        user = User.query.filter_by(email=normalize_email(email)).first()
        if not user:
            raise NotFound(f"No user with email {email}")

        user.role = role
        db.session.commit()
        logger.info("Role of %s set to %s", user.email, role)
        return user

    @staticmethod
    def list_users() -> list:
        return User.query.order_by(User.id).all()
