from dataclasses import dataclass
from decimal import Decimal
from typing import Optional


@dataclass
class Vehicle:
    """
    Catalog entry as seen by the booking core. The daily rate is the listed
    price per started day, in the service currency.
    """
    vehicle_id: int
    brand: str
    model: str
    year: Optional[int]
    daily_rate: Decimal
    location: str = ""
    image_url: Optional[str] = None

    @property
    def descriptor(self) -> str:
        """Human readable label embedded in handover tokens, e.g. 'Toyota Innova (2021)'."""
        label = f"{self.brand} {self.model}".strip()
        return f"{label} ({self.year})" if self.year else label

    @classmethod
    def from_dict(cls, d: dict) -> "Vehicle":
        return cls(
            vehicle_id=d["vehicle_id"],
            brand=d.get("brand") or "",
            model=d.get("model") or "",
            year=d.get("year"),
            daily_rate=Decimal(str(d["daily_rate"])),
            location=d.get("location") or "",
            image_url=d.get("image_url"),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.vehicle_id,
            "brand": self.brand,
            "model": self.model,
            "year": self.year,
            "daily_rate": str(self.daily_rate),
            "location": self.location,
            "image_url": self.image_url,
            "descriptor": self.descriptor,
        }
