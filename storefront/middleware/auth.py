import logging
from functools import wraps

from flask import current_app, g, request

from storefront.services.errors import Forbidden

logger = logging.getLogger(__name__)


def get_session_store():
    return current_app.extensions["session_store"]


def load_session():
    """Bind the caller's session identity (or None) to ``g`` for this request."""
    session_id = request.cookies.get(current_app.config["SESSION_COOKIE_NAME"])
    g.session_id = session_id
    g.identity = get_session_store().get(session_id)


def require_login(f):
    """Middleware to require a logged-in session."""
    @wraps(f)
    def decorated(*args, **kwargs):
        if not g.get("identity"):
            raise Forbidden("Login required")
        return f(*args, **kwargs)
    return decorated


def require_admin(f):
    """Middleware to require admin role. Runs before the view touches any data."""
    @wraps(f)
    def decorated(*args, **kwargs):
        identity = g.get("identity")
        if not identity or identity.get("role") != "admin":
            logger.warning(
                "Admin access denied: %s %s (session user: %s)",
                request.method, request.path, identity.get("email") if identity else None,
            )
            raise Forbidden("Admin access required")
        return f(*args, **kwargs)
    return decorated
