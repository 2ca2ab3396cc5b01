from dataclasses import dataclass
from typing import Optional

from carhire.utils.constants import Role


@dataclass(frozen=True)
class Caller:
    """
    Verified identity of whoever is calling the booking core. The core trusts
    this value; building it from credentials is the controllers' job.
    """
    customer_id: Optional[int] = None
    is_operator: bool = False

    @classmethod
    def customer(cls, customer_id: int) -> "Caller":
        return cls(customer_id=customer_id)

    @classmethod
    def operator(cls) -> "Caller":
        return cls(is_operator=True)

    @property
    def role(self) -> Optional[str]:
        if self.is_operator:
            return Role.OPERATOR
        if self.customer_id is not None:
            return Role.CUSTOMER
        return None

    def owns(self, customer_id: Optional[int]) -> bool:
        return self.customer_id is not None and customer_id == self.customer_id


@dataclass
class Customer:
    customer_id: int
    name: str
    email: str
    phone: str = ""

    @classmethod
    def from_dict(cls, d: dict) -> "Customer":
        return cls(
            customer_id=d["customer_id"],
            name=d.get("name") or "",
            email=d.get("email") or "",
            phone=d.get("phone") or "",
        )

    def to_dict(self) -> dict:
        return {"id": self.customer_id, "name": self.name, "email": self.email, "phone": self.phone}
