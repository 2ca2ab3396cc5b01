"""Payment intents: UPI payment requests and the operator's confirmation of receipt."""

import logging
import secrets
from decimal import Decimal
from typing import Optional, Tuple
from urllib.parse import quote, urlencode

from carhire.exceptions import (
    ForbiddenError,
    InvalidTransitionError,
    NotFoundError,
)
from carhire.models.reservation import PaymentInstruction, PaymentIntent, Reservation
from carhire.models.store import Store
from carhire.models.user import Caller
from carhire.services.booking_service import BookingLedger
from carhire.services.common import Clock, iso, utc_now
from carhire.utils.constants import IntentStatus, ReservationStatus
from carhire.utils.qr import render_qr_svg

logger = logging.getLogger(__name__)


def require_operator(caller: Caller) -> None:
    if not caller.is_operator:
        raise ForbiddenError("Error: operator access required")


class PaymentIntentManager:
    """
    Tracks the single payment claim of each reservation.

    Money movement itself is not observed: a payment counts as received when
    an operator confirms it with ``mark_verified_by_operator``.
    """

    def __init__(self, store: Store, ledger: BookingLedger, payee_vpa: str, payee_name: str,
                 clock: Clock = utc_now):
        self.store = store
        self.ledger = ledger
        self.payee_vpa = payee_vpa
        self.payee_name = payee_name
        self.clock = clock

    def _new_reference(self) -> str:
        return f"CH{self.clock():%Y%m%d%H%M%S}{secrets.token_hex(3).upper()}"

    def build_instruction(self, reservation: Reservation, reference: str) -> PaymentInstruction:
        """Encode payee, amount, currency and a note naming the booking as a UPI link + QR."""
        params = {
            "pa": self.payee_vpa,
            "pn": self.payee_name,
            "am": f"{Decimal(reservation.amount):.2f}",
            "cu": reservation.currency,
            "tn": f"Booking {reservation.reservation_id}",
            "tr": reference,
        }
        uri = "upi://pay?" + urlencode(params, quote_via=quote)
        return PaymentInstruction(uri=uri, qr_svg=render_qr_svg(uri))

    def request_payment(self, reservation_id: int,
                        caller: Caller) -> Tuple[PaymentIntent, PaymentInstruction]:
        """Open a pending intent for a BOOKED reservation owned by the caller."""
        with self.store.transaction() as st:
            res = self.ledger.get_reservation(reservation_id)
            if not caller.owns(res.customer_id):
                raise ForbiddenError(f"Error: booking {reservation_id} belongs to another customer")
            if res.status != ReservationStatus.BOOKED:
                raise InvalidTransitionError(
                    f"Error: booking {reservation_id} is {res.status}, payment already requested")
            if st.active_intent_for(reservation_id) is not None:
                raise InvalidTransitionError(
                    f"Error: booking {reservation_id} already has a payment in progress")

            reference = self._new_reference()
            instruction = self.build_instruction(res, reference)
            pi = st.insert_intent({
                "reservation_id": reservation_id,
                "customer_id": res.customer_id,
                "amount": res.amount,
                "currency": res.currency,
                "status": IntentStatus.PENDING,
                "reference": reference,
                "created_at": iso(self.clock()),
                "verified_at": None,
            })
            self.ledger.transition(reservation_id, {ReservationStatus.BOOKED},
                                   ReservationStatus.PENDING_PAYMENT,
                                   {"payment_reference": reference})
            intent = PaymentIntent.from_dict(pi)

        logger.info("Payment intent %s (%s) opened for booking %s", intent.intent_id,
                    reference, reservation_id)
        return intent, instruction

    def get_intent(self, reservation_id: int) -> Optional[PaymentIntent]:
        with self.store.reading() as st:
            pi = st.active_intent_for(reservation_id)
            return PaymentIntent.from_dict(pi) if pi else None

    def mark_verified_by_operator(self, reservation_id: int, caller: Caller) -> PaymentIntent:
        """Record that the operator saw the money arrive; the booking becomes PAID."""
        require_operator(caller)
        with self.store.transaction() as st:
            self.ledger.get_reservation(reservation_id)
            pi = st.active_intent_for(reservation_id)
            if pi is None:
                raise NotFoundError(f"Error: no payment found for booking {reservation_id}")
            if pi["status"] != IntentStatus.PENDING:
                raise InvalidTransitionError(
                    f"Error: payment for booking {reservation_id} is already verified")
            now = iso(self.clock())
            self.ledger.transition(reservation_id, {ReservationStatus.PENDING_PAYMENT},
                                   ReservationStatus.PAID)
            st.update_intent(pi["intent_id"], {"status": IntentStatus.VERIFIED, "verified_at": now})
            intent = PaymentIntent.from_dict(pi)

        logger.info("Payment %s for booking %s verified by operator", intent.reference, reservation_id)
        return intent
