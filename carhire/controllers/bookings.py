from flask import Blueprint, jsonify, request

from ..exceptions import ForbiddenError, ValidationError
from ..services.common import as_int_id
from ..services.container import current_services
from ..utils.decorators import current_caller, customer_required, login_required
from .common import request_data

bp = Blueprint("bookings", __name__, url_prefix="/api/bookings")


@bp.post("")
@customer_required
def create_booking():
    """Create a booking for the logged-in customer. Retries may send an Idempotency-Key header."""
    data = request_data()
    if not data.get("car_id") or not data.get("start_date") or not data.get("end_date"):
        raise ValidationError("car_id, start_date and end_date are required.")

    reservation = current_services().ledger.create_reservation(
        vehicle_id=as_int_id(data.get("car_id"), "car id"),
        customer_id=current_caller().customer_id,
        start=data.get("start_date"),
        end=data.get("end_date"),
        idempotency_key=request.headers.get("Idempotency-Key") or data.get("idempotency_key"),
    )
    return jsonify(reservation.to_dict()), 201


@bp.get("")
@customer_required
def my_bookings():
    rows = current_services().ledger.list_reservations(customer_id=current_caller().customer_id)
    return jsonify([r.to_dict() for r in rows])


@bp.get("/<booking_id>")
@login_required
def get_booking(booking_id):
    """Owner or operator only."""
    caller = current_caller()
    svc = current_services()
    reservation = svc.ledger.get_reservation(as_int_id(booking_id, "booking id"))
    if not (caller.is_operator or caller.owns(reservation.customer_id)):
        raise ForbiddenError("Error: not your booking")

    out = reservation.to_dict()
    intent = svc.payments.get_intent(reservation.reservation_id)
    out["payment"] = intent.to_dict() if intent else None
    return jsonify(out)


@bp.post("/<booking_id>/pay")
@customer_required
def pay(booking_id):
    """Open the payment for a booking and return the UPI link and QR code to scan."""
    intent, instruction = current_services().payments.request_payment(
        as_int_id(booking_id, "booking id"), current_caller())
    return jsonify({"payment": intent.to_dict(), **instruction.to_dict()}), 201
