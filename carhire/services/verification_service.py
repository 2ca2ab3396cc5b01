"""Verification authority: mints the handover token once a payment is confirmed."""

import logging

from carhire.exceptions import InvalidTransitionError, NotFoundError
from carhire.models.store import Store
from carhire.models.user import Caller
from carhire.services.booking_service import BookingLedger
from carhire.services.common import Clock, iso, utc_now
from carhire.services.payment_service import require_operator
from carhire.services.vehicle_service import VehicleService
from carhire.utils.constants import ReservationStatus
from carhire.utils.tokens import HandoverTokenCodec

logger = logging.getLogger(__name__)


class VerificationAuthority:

    def __init__(self, store: Store, ledger: BookingLedger, catalog: VehicleService,
                 codec: HandoverTokenCodec, clock: Clock = utc_now):
        self.store = store
        self.ledger = ledger
        self.catalog = catalog
        self.codec = codec
        self.clock = clock

    def mint_handover_token(self, reservation_id: int, caller: Caller) -> str:
        """
        Seal the booking details into a signed token and move PAID -> VERIFIED.

        The token is minted once. A repeated call fails; the stored token can be
        read back from the reservation.
        """
        require_operator(caller)
        with self.store.transaction() as st:
            res = self.ledger.get_reservation(reservation_id)
            if res.status != ReservationStatus.PAID or res.handover_token:
                raise InvalidTransitionError(
                    f"Error: booking {reservation_id} is {res.status}, handover token not mintable")
            customer = st.get_customer(res.customer_id)
            if customer is None:
                raise NotFoundError(f"Error: customer {res.customer_id} not found")

            token = self.codec.dumps({
                "v": 1,
                "rid": res.reservation_id,
                "customer": {"name": customer["name"], "email": customer["email"]},
                "vehicle": self.catalog.describe(res.vehicle_id),
                "start": res.start_date.isoformat(),
                "end": res.end_date.isoformat(),
                "minted_at": iso(self.clock()),
            })
            self.ledger.transition(reservation_id, {ReservationStatus.PAID},
                                   ReservationStatus.VERIFIED, {"handover_token": token})

        logger.info("Handover token minted for booking %s", reservation_id)
        return token
