# carhire/utils/constants.py

"""
Global constants for roles, statuses and formats.
These constants are imported by both models and services.
"""

# Date format (used for reservation start/end)
DATE_FMT = "%Y-%m-%d"


class Role:
    CUSTOMER = "customer"
    OPERATOR = "operator"


class ReservationStatus:
    BOOKED = "BOOKED"
    PENDING_PAYMENT = "PENDING_PAYMENT"
    PAID = "PAID"
    VERIFIED = "VERIFIED"
    COLLECTED = "COLLECTED"

    ALL = (BOOKED, PENDING_PAYMENT, PAID, VERIFIED, COLLECTED)


# The only legal edges of the reservation lifecycle.
NEXT_STATUS = {
    ReservationStatus.BOOKED: ReservationStatus.PENDING_PAYMENT,
    ReservationStatus.PENDING_PAYMENT: ReservationStatus.PAID,
    ReservationStatus.PAID: ReservationStatus.VERIFIED,
    ReservationStatus.VERIFIED: ReservationStatus.COLLECTED,
}


class IntentStatus:
    PENDING = "pending"
    VERIFIED = "verified"


# Timestamp column written alongside each status
STATUS_TIMESTAMPS = {
    ReservationStatus.PENDING_PAYMENT: "payment_requested_at",
    ReservationStatus.PAID: "paid_at",
    ReservationStatus.VERIFIED: "verified_at",
    ReservationStatus.COLLECTED: "collected_at",
}

DEFAULT_CURRENCY = "INR"
