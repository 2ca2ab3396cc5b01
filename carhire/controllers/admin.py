from flask import Blueprint, jsonify, request

from ..exceptions import ValidationError
from ..services.common import as_int_id
from ..services.container import current_services
from ..utils.decorators import current_caller, operator_required
from .common import request_data

bp = Blueprint("admin", __name__, url_prefix="/api/admin")


@bp.get("/bookings")
@operator_required
def list_bookings():
    """Operator queue, optionally narrowed with ?status=PENDING_PAYMENT etc."""
    status = (request.args.get("status") or "").strip().upper() or None
    rows = current_services().ledger.list_reservations(status=status)
    return jsonify([r.to_dict() for r in rows])


@bp.post("/bookings/<booking_id>/confirm-payment")
@operator_required
def confirm_payment(booking_id):
    svc = current_services()
    rid = as_int_id(booking_id, "booking id")
    intent = svc.payments.mark_verified_by_operator(rid, current_caller())
    return jsonify({"payment": intent.to_dict(), "booking": svc.ledger.get_reservation(rid).to_dict()})


@bp.post("/bookings/<booking_id>/verify")
@operator_required
def verify(booking_id):
    """Mint the handover token the customer shows at pickup."""
    svc = current_services()
    rid = as_int_id(booking_id, "booking id")
    token = svc.verification.mint_handover_token(rid, current_caller())
    return jsonify({"booking_id": rid, "handover_token": token,
                    "status": svc.ledger.get_reservation(rid).status})


@bp.post("/handover")
@operator_required
def handover():
    token = request_data().get("token")
    if not isinstance(token, str) or not token.strip():
        raise ValidationError("token is required.")
    token = token.strip()
    confirmation = current_services().handover.redeem(token, current_caller())
    return jsonify(confirmation.to_dict())
