from __future__ import annotations

from decimal import Decimal
from typing import List, Optional

from carhire.exceptions import VehicleNotFoundError
from carhire.models.store import Store
from carhire.models.vehicle import Vehicle


def _lc(s):
    """Safe lowercase for case-insensitive compare."""
    return (s or "").lower()


def _to_decimal_safe(value) -> Optional[Decimal]:
    if value in (None, ""):
        return None
    try:
        return Decimal(str(value))
    except ArithmeticError:
        return None


class VehicleService:
    """
    Read-only vehicle catalog used by the booking core.

    Every lookup holds the store lock for a consistent read and waits at most
    ``timeout`` seconds for it; a busy store raises CatalogUnavailableError
    before the caller has written anything.
    """

    def __init__(self, store: Store, timeout: float = 2.0):
        self.store = store
        self.timeout = timeout

    def get_vehicle(self, vehicle_id: int) -> Vehicle:
        """Return a vehicle by ID or raise VehicleNotFoundError."""
        with self.store.reading(self.timeout) as st:
            v = st.get_vehicle(vehicle_id)
            if v is None:
                raise VehicleNotFoundError(f"Error: vehicle with ID '{vehicle_id}' not found")
            return Vehicle.from_dict(v)

    def get_day_rate(self, vehicle_id: int) -> Decimal:
        return self.get_vehicle(vehicle_id).daily_rate

    def describe(self, vehicle_id: int) -> str:
        return self.get_vehicle(vehicle_id).descriptor

    def filter_vehicles(self, brand=None, location=None, min_rate=None, max_rate=None) -> List[Vehicle]:
        """
        Filter vehicles by brand/model keyword, location and daily rate range.
        Invalid min/max values are ignored; swapped bounds are put back in order.
        """
        with self.store.reading(self.timeout) as st:
            res = [Vehicle.from_dict(v) for v in st.vehicles.values()]

        if brand:
            kw = _lc(brand).strip()
            res = [v for v in res if kw in _lc(v.brand) or kw in _lc(v.model)]

        if location:
            loc = _lc(location).strip()
            res = [v for v in res if loc in _lc(v.location)]

        min_val = _to_decimal_safe(min_rate)
        max_val = _to_decimal_safe(max_rate)
        if (min_val is not None) and (max_val is not None) and (min_val > max_val):
            min_val, max_val = max_val, min_val
        if min_val is not None:
            res = [v for v in res if v.daily_rate >= min_val]
        if max_val is not None:
            res = [v for v in res if v.daily_rate <= max_val]

        res.sort(key=lambda v: v.vehicle_id)
        return res
