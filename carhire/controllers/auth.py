from flask import Blueprint, current_app, jsonify, session

from ..exceptions import UnauthorizedError, ValidationError
from ..services.container import current_services
from ..utils.constants import Role
from .common import request_data

bp = Blueprint("auth", __name__, url_prefix="/api")


@bp.post("/register")
def register():
    data = request_data()
    customer = current_services().users.register(
        name=data.get("name"),
        email=data.get("email"),
        phone=data.get("phone"),
        password=data.get("password"),
    )
    current_app.logger.info("Customer %s registered", customer.customer_id)
    return jsonify({"message": "Registration successful!", "user": customer.to_dict()}), 201


@bp.post("/login")
def login():
    data = request_data()
    email = (data.get("email") or "").strip()
    password = data.get("password") or ""
    if not email or not password:
        raise ValidationError("Email and password required.")

    customer = current_services().users.authenticate(email, password)
    if customer is None:
        raise UnauthorizedError("Invalid email or password.")

    session.clear()
    session["customer_id"] = customer.customer_id
    session["role"] = Role.CUSTOMER
    return jsonify({"message": "Login successful!", "user": customer.to_dict()})


@bp.post("/admin/login")
def admin_login():
    data = request_data()
    email = (data.get("email") or "").strip()
    ok = current_services().users.authenticate_operator(
        email,
        data.get("password") or "",
        current_app.config.get("ADMIN_EMAIL"),
        current_app.config.get("ADMIN_PASSWORD_HASH"),
    )
    if not ok:
        current_app.logger.warning("Rejected operator login for %r", email)
        raise UnauthorizedError("Invalid admin credentials")

    session.clear()
    session["role"] = Role.OPERATOR
    return jsonify({"message": "Admin login successful!", "admin": {"email": email}})


@bp.post("/logout")
def logout():
    session.clear()
    return jsonify({"message": "Logged out"})
