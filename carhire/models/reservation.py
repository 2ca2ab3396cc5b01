from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Optional


@dataclass
class Reservation:
    """
    One customer's claim on a vehicle for the half-open range [start_date, end_date).
    The Store keeps raw dicts; callers outside the ledger only ever see this copy.
    """
    reservation_id: int
    vehicle_id: int
    customer_id: int
    start_date: date
    end_date: date
    days: int
    day_rate: Decimal
    amount: Decimal
    currency: str
    status: str
    handover_token: Optional[str] = None
    payment_reference: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    timestamps: dict = field(default_factory=dict)

    @classmethod
    def from_dict(cls, d: dict) -> "Reservation":
        stamps = {k: d[k] for k in ("payment_requested_at", "paid_at", "verified_at", "collected_at")
                  if d.get(k)}
        return cls(
            reservation_id=d["reservation_id"],
            vehicle_id=d["vehicle_id"],
            customer_id=d["customer_id"],
            start_date=d["start_date"],
            end_date=d["end_date"],
            days=d["days"],
            day_rate=d["day_rate"],
            amount=d["amount"],
            currency=d["currency"],
            status=d["status"],
            handover_token=d.get("handover_token"),
            payment_reference=d.get("payment_reference"),
            created_at=d.get("created_at"),
            updated_at=d.get("updated_at"),
            timestamps=stamps,
        )

    def to_dict(self) -> dict:
        out = {
            "id": self.reservation_id,
            "car_id": self.vehicle_id,
            "customer_id": self.customer_id,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "days": self.days,
            "day_rate": str(self.day_rate),
            "amount": str(self.amount),
            "currency": self.currency,
            "status": self.status,
            "handover_token": self.handover_token,
            "payment_reference": self.payment_reference,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
        out.update(self.timestamps)
        return out


@dataclass
class PaymentIntent:
    intent_id: int
    reservation_id: int
    customer_id: int
    amount: Decimal
    currency: str
    status: str
    reference: str
    created_at: Optional[str] = None
    verified_at: Optional[str] = None

    @classmethod
    def from_dict(cls, d: dict) -> "PaymentIntent":
        return cls(**{k: d.get(k) for k in cls.__dataclass_fields__})

    def to_dict(self) -> dict:
        return {
            "id": self.intent_id,
            "booking_id": self.reservation_id,
            "customer_id": self.customer_id,
            "amount": str(self.amount),
            "currency": self.currency,
            "status": self.status,
            "reference": self.reference,
            "created_at": self.created_at,
            "verified_at": self.verified_at,
        }


@dataclass
class PaymentInstruction:
    """What the customer scans: a UPI deep link and the same link as an SVG QR code."""
    uri: str
    qr_svg: str

    def to_dict(self) -> dict:
        return {"upi_uri": self.uri, "qr_svg": self.qr_svg}


@dataclass
class HandoverConfirmation:
    """Shown to the operator after a successful pickup."""
    reservation_id: int
    customer_name: str
    vehicle: str
    collected_at: str
    collected_at_local: str = ""

    def to_dict(self) -> dict:
        return {
            "booking_id": self.reservation_id,
            "customer_name": self.customer_name,
            "vehicle": self.vehicle,
            "collected_at": self.collected_at,
            "collected_at_local": self.collected_at_local,
        }
