from __future__ import annotations

import re
from typing import Optional

from carhire.exceptions import ValidationError
from carhire.models.store import IntegrityError, Store
from carhire.models.user import Customer
from carhire.services.common import Clock, iso, utc_now
from carhire.utils.security import check_hash, generate_hash, same_secret

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
PASSWORD_PATTERN = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d).{6,}$")


class UserService:
    """Customer registration and the credential checks behind login."""

    def __init__(self, store: Store, clock: Clock = utc_now):
        self.store = store
        self.clock = clock

    def register(self, name: str, email: str, phone: str, password: str) -> Customer:
        name = (name or "").strip()
        email = (email or "").strip().lower()
        phone = (phone or "").strip()
        password = password or ""

        if not name or not email or not phone or not password:
            raise ValidationError("All fields are required.")
        if not EMAIL_PATTERN.match(email):
            raise ValidationError("Invalid email address.")
        # Password policy (server-side enforcement)
        if not PASSWORD_PATTERN.match(password):
            raise ValidationError(
                "Password must have at least 6 characters, including A-Z, a-z, and 0-9.")

        try:
            cid = self.store.create_customer(name, email, phone, generate_hash(password),
                                             created_at=iso(self.clock()))
        except IntegrityError:
            raise ValidationError("Email already registered.") from None
        return Customer.from_dict(self.store.get_customer(cid))

    def authenticate(self, email: str, password: str) -> Optional[Customer]:
        c = self.store.find_customer(email)
        if not c or not check_hash(password or "", c["password_hash"]):
            return None
        return Customer.from_dict(c)

    def get_customer(self, customer_id: int) -> Optional[Customer]:
        c = self.store.get_customer(customer_id)
        return Customer.from_dict(c) if c else None

    @staticmethod
    def authenticate_operator(email: str, password: str, admin_email: str,
                              admin_password_hash: str) -> bool:
        """Operator login against the configured credentials; disabled when unset."""
        if not admin_email or not admin_password_hash:
            return False
        if not same_secret((email or "").strip().lower(), admin_email.strip().lower()):
            return False
        return check_hash(password or "", admin_password_hash)
