import logging
from datetime import timedelta

from flask import Flask
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

from storefront.config.settings import Config
from storefront.models.database import db
from storefront.api import auth_bp, products_bp, orders_bp, admin_bp
from storefront.cli import register_commands
from storefront.middleware.auth import load_session
from storefront.middleware.error_handler import register_error_handlers
from storefront.services.session_service import SessionStore


def create_app(config_object=Config, **overrides) -> Flask:
    """Application factory."""
    app = Flask(__name__)
    app.config.from_object(config_object)
    app.config.update(overrides)

    logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger("storefront").setLevel(app.config["LOG_LEVEL"])
    app.logger.setLevel(app.config["LOG_LEVEL"])

    # Initialize extensions
    db.init_app(app)
    app.extensions["session_store"] = SessionStore(
        ttl=timedelta(minutes=app.config["SESSION_TTL_MINUTES"]),
    )

    CORS(app, origins=app.config["CORS_ORIGINS"], supports_credentials=True)

    Limiter(
        app=app,
        key_func=get_remote_address,
        default_limits=[app.config["RATE_LIMIT_DEFAULT"]],
    )

    app.before_request(load_session)

    # Register blueprints
    app.register_blueprint(auth_bp)
    app.register_blueprint(products_bp)
    app.register_blueprint(orders_bp)
    app.register_blueprint(admin_bp)

    # Register error handlers
    register_error_handlers(app)

    register_commands(app)

    return app
