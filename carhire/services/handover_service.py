"""Handover verifier: redeems a handover token when the customer picks up the vehicle."""

import hmac
import logging

from carhire.exceptions import InvalidTransitionError, TokenMismatchError
from carhire.models.reservation import HandoverConfirmation
from carhire.models.store import Store
from carhire.models.user import Caller
from carhire.services.booking_service import BookingLedger
from carhire.services.payment_service import require_operator
from carhire.utils.constants import ReservationStatus
from carhire.utils.filters import fmt_iso_local
from carhire.utils.tokens import HandoverTokenCodec

logger = logging.getLogger(__name__)


class HandoverVerifier:

    def __init__(self, store: Store, ledger: BookingLedger, codec: HandoverTokenCodec,
                 display_timezone: str = "UTC"):
        self.store = store
        self.ledger = ledger
        self.codec = codec
        self.display_timezone = display_timezone

    def redeem(self, token: str, caller: Caller) -> HandoverConfirmation:
        """
        Check the presented token against the one stored on its booking and
        close the booking as COLLECTED. A token can be redeemed only once.
        """
        require_operator(caller)
        payload = self.codec.loads(token)
        rid = payload["rid"]

        with self.store.transaction():
            res = self.ledger.get_reservation(rid)
            stored = res.handover_token or ""
            if not hmac.compare_digest(stored.encode(), token.encode()):
                raise TokenMismatchError(f"Error: token does not match booking {rid}")
            if res.status != ReservationStatus.VERIFIED:
                raise InvalidTransitionError(f"Error: booking {rid} is {res.status}, cannot hand over")
            done = self.ledger.transition(rid, {ReservationStatus.VERIFIED}, ReservationStatus.COLLECTED)

        collected_at = done.timestamps["collected_at"]
        logger.info("Booking %s collected", rid)
        return HandoverConfirmation(
            reservation_id=rid,
            customer_name=(payload.get("customer") or {}).get("name", ""),
            vehicle=payload.get("vehicle", ""),
            collected_at=collected_at,
            collected_at_local=fmt_iso_local(collected_at, self.display_timezone),
        )
