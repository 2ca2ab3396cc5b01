from flask import Blueprint, jsonify, request

from ..services.common import as_int_id
from ..services.container import current_services

bp = Blueprint("vehicles", __name__, url_prefix="/api")


@bp.get("/cars")
def list_cars():
    """Catalog listing with optional filters; empty query params are ignored."""
    q = {k: (v or "").strip() for k, v in request.args.items()}
    cars = current_services().catalog.filter_vehicles(
        brand=q.get("brand"),
        location=q.get("location"),
        min_rate=q.get("min"),
        max_rate=q.get("max"),
    )
    return jsonify([c.to_dict() for c in cars])


@bp.get("/cars/<car_id>")
def get_car(car_id):
    car = current_services().catalog.get_vehicle(as_int_id(car_id, "car id"))
    return jsonify(car.to_dict())
