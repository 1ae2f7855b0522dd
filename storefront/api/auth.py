from flask import Blueprint, current_app, g, jsonify, request
from marshmallow import EXCLUDE, Schema, ValidationError, fields, validate, validates

from storefront.middleware.auth import get_session_store
from storefront.middleware.error_handler import validation_failed
from storefront.services.auth_service import MAX_PASSWORD_BYTES, AuthService

auth_bp = Blueprint("auth", __name__)


class RegisterSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    firstname = fields.String(required=True, validate=validate.Length(min=1, max=100))
    middlename = fields.String(load_default="", validate=validate.Length(max=100))
    lastname = fields.String(required=True, validate=validate.Length(min=1, max=100))
    email = fields.Email(required=True)
    password = fields.String(required=True, validate=validate.Length(min=8, max=MAX_PASSWORD_BYTES))
    address = fields.String(load_default="", validate=validate.Length(max=500))
    contact = fields.String(load_default="", validate=validate.Length(max=50))

    @validates("password")
    def check_password_bytes(self, value, **kwargs):
        if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes.")


class LoginSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    email = fields.String(required=True)
    password = fields.String(required=True)


def _set_session_cookie(response, session_id):
    config = current_app.config
    response.set_cookie(
        config["SESSION_COOKIE_NAME"],
        session_id,
        max_age=config["SESSION_TTL_MINUTES"] * 60,
        httponly=True,
        secure=config["SESSION_COOKIE_SECURE"],
        samesite="Lax",
    )


@auth_bp.route("/api/register", methods=["POST"])
def register():
    """Register a new user account."""
    schema = RegisterSchema()
    payload = request.get_json(silent=True) or {}
    errors = schema.validate(payload)
    if errors:
        return validation_failed(errors)

    data = schema.load(payload)
    AuthService.register_user(**data)
    return jsonify({"success": True, "message": "Registration successful!"}), 201


@auth_bp.route("/api/login", methods=["POST"])
def login():
    """Authenticate and start a cookie-bound session."""
    schema = LoginSchema()
    payload = request.get_json(silent=True) or {}
    errors = schema.validate(payload)
    if errors:
        return validation_failed(errors)

    data = schema.load(payload)
    user = AuthService.authenticate(data["email"], data["password"])

    store = get_session_store()
    # A fresh id on every login; the previous session, if any, is dropped.
    store.destroy(g.get("session_id"))
    identity = user.identity()
    session_id = store.create(identity)

    response = jsonify({
        "success": True,
        "user": identity,
        "role": identity["role"],
        "message": "Login successful!",
    })
    _set_session_cookie(response, session_id)
    return response


@auth_bp.route("/logout", methods=["POST"])
def logout():
    """End the caller's session, if there is one."""
    get_session_store().destroy(g.get("session_id"))
    g.identity = None

    response = jsonify({"success": True})
    response.delete_cookie(current_app.config["SESSION_COOKIE_NAME"])
    return response


@auth_bp.route("/status", methods=["GET"])
def status():
    """Report whether the caller is logged in. Not an authorization check."""
    identity = g.get("identity")
    if identity:
        return jsonify({"loggedIn": True, "user": identity})
    return jsonify({"loggedIn": False})
