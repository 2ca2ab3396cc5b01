"""Booking ledger: owns reservation records and every change to their status."""

import logging
from typing import Iterable, List, Optional

from carhire.exceptions import (
    InvalidDateRangeError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
    VehicleUnavailableError,
)
from carhire.models.reservation import Reservation
from carhire.models.store import Store
from carhire.services.common import Clock, as_date, iso, overlap, utc_now
from carhire.services.pricing import billable_days, price
from carhire.services.vehicle_service import VehicleService
from carhire.utils.constants import (
    DEFAULT_CURRENCY,
    NEXT_STATUS,
    STATUS_TIMESTAMPS,
    ReservationStatus,
)

logger = logging.getLogger(__name__)

# Fields a transition patch may never touch
PROTECTED_FIELDS = frozenset({
    "reservation_id", "vehicle_id", "customer_id", "start_date", "end_date",
    "days", "day_rate", "amount", "currency", "status", "idempotency_key", "created_at",
})


class BookingLedger:
    """
    Create, read and transition reservations.

    Every status change in the system goes through ``transition``; other
    services never write reservation records directly.
    """

    def __init__(self, store: Store, catalog: VehicleService, clock: Clock = utc_now,
                 currency: str = DEFAULT_CURRENCY):
        self.store = store
        self.catalog = catalog
        self.clock = clock
        self.currency = currency

    @staticmethod
    def request_key(vehicle_id, customer_id, start, end, idempotency_key=None) -> str:
        """
        Idempotency key of a booking request. Keys sent by the caller are scoped
        to the customer; without one the key is derived from the request itself.
        """
        if idempotency_key:
            return f"customer:{customer_id}:{idempotency_key}"
        return f"auto:{customer_id}:{vehicle_id}:{start}:{end}"

    @staticmethod
    def _replayed(st: Store, key: str, vehicle_id, customer_id, d1, d2) -> Optional[Reservation]:
        existing = st.find_reservation_by_key(key)
        if existing is None:
            return None
        same = (existing["vehicle_id"], existing["customer_id"], existing["start_date"],
                existing["end_date"]) == (vehicle_id, customer_id, d1, d2)
        if not same:
            raise ValidationError("Error: idempotency key was already used for another booking")
        logger.info("Booking request %s replayed; returning booking %s",
                    key, existing["reservation_id"])
        return Reservation.from_dict(existing)

    def create_reservation(self, vehicle_id: int, customer_id: int, start, end,
                           idempotency_key: Optional[str] = None) -> Reservation:
        """
        Price and persist a new reservation in BOOKED.

        Retrying a request that may already have been committed returns the
        committed reservation instead of creating a second one, even once the
        start date has passed or the vehicle is no longer in the catalog.
        """
        d1 = as_date(start)
        d2 = as_date(end)
        days = billable_days(d1, d2)
        key = self.request_key(vehicle_id, customer_id, d1, d2, idempotency_key)

        with self.store.reading(self.catalog.timeout) as st:
            replay = self._replayed(st, key, vehicle_id, customer_id, d1, d2)
        if replay is not None:
            return replay

        if d1 < self.clock().date():
            raise InvalidDateRangeError("Error: start date cannot be in the past")

        # Catalog lookup is bounded and happens before anything is written.
        day_rate = self.catalog.get_day_rate(vehicle_id)
        amount = price(day_rate, d1, d2)

        with self.store.transaction() as st:
            replay = self._replayed(st, key, vehicle_id, customer_id, d1, d2)
            if replay is not None:
                return replay

            if st.get_customer(customer_id) is None:
                raise NotFoundError(f"Error: customer {customer_id} not found")

            for r in st.reservations.values():
                if r["vehicle_id"] != vehicle_id:
                    continue
                if overlap(d1, d2, r["start_date"], r["end_date"]):
                    raise VehicleUnavailableError(
                        "Error: vehicle is already booked for the selected dates")

            now = iso(self.clock())
            rec = st.insert_reservation({
                "vehicle_id": vehicle_id,
                "customer_id": customer_id,
                "start_date": d1,
                "end_date": d2,
                "days": days,
                "day_rate": day_rate,
                "amount": amount,
                "currency": self.currency,
                "status": ReservationStatus.BOOKED,
                "handover_token": None,
                "idempotency_key": key,
                "created_at": now,
                "updated_at": now,
            })

        logger.info("Booking %s created: vehicle=%s customer=%s %s..%s amount=%s %s",
                    rec["reservation_id"], vehicle_id, customer_id, d1, d2, amount, self.currency)
        return Reservation.from_dict(rec)

    def get_reservation(self, reservation_id: int) -> Reservation:
        with self.store.reading() as st:
            r = st.get_reservation(reservation_id)
            if r is None:
                raise NotFoundError(f"Error: booking {reservation_id} not found")
            return Reservation.from_dict(r)

    def list_reservations(self, customer_id: Optional[int] = None,
                          status: Optional[str] = None) -> List[Reservation]:
        if status is not None and status not in ReservationStatus.ALL:
            raise ValidationError(f"Error: unknown status {status!r}")
        with self.store.reading():
            rows = [
                Reservation.from_dict(r) for r in self.store.reservations.values()
                if (customer_id is None or r["customer_id"] == customer_id)
                and (status is None or r["status"] == status)
            ]
        rows.sort(key=lambda r: r.reservation_id, reverse=True)
        return rows

    def transition(self, reservation_id: int, from_allowed: Iterable[str], to: str,
                   patch: Optional[dict] = None) -> Reservation:
        """
        Move a reservation to ``to`` if its current status is in ``from_allowed``
        and the move is an edge of the lifecycle. The patch and the new status
        are written together or not at all.
        """
        patch = dict(patch or {})
        bad = PROTECTED_FIELDS.intersection(patch)
        if bad:
            raise ValueError(f"transition patch may not change {sorted(bad)}")

        with self.store.transaction() as st:
            r = st.get_reservation(reservation_id)
            if r is None:
                raise NotFoundError(f"Error: booking {reservation_id} not found")
            current = r["status"]
            if current not in set(from_allowed) or NEXT_STATUS.get(current) != to:
                raise InvalidTransitionError(
                    f"Error: booking {reservation_id} is {current}, cannot move to {to}")
            now = iso(self.clock())
            patch.setdefault(STATUS_TIMESTAMPS[to], now)
            patch.update(status=to, updated_at=now)
            st.update_reservation(reservation_id, patch)
            result = Reservation.from_dict(r)

        logger.info("Booking %s: %s -> %s", reservation_id, current, to)
        return result
