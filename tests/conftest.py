import sys, pathlib
from datetime import datetime, timedelta, timezone

ROOT = pathlib.Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

import pytest

from carhire import create_app
from carhire.models.store import Store
from carhire.models.user import Caller
from carhire.services.container import EXTENSION_KEY
from carhire.utils.security import generate_hash

ADMIN_EMAIL = "admin@a6cars.com"
ADMIN_PASSWORD = "Admin123"


class FixedClock:
    """Injectable clock; tests move it forward explicitly."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FixedClock(datetime(2023, 12, 1, 10, 0, tzinfo=timezone.utc))


@pytest.fixture
def store(tmp_path):
    return Store(tmp_path / "data.pkl")


@pytest.fixture
def app(store, clock):
    app = create_app(
        {
            "TESTING": True,
            "SECRET_KEY": "test",
            "HANDOVER_SECRET": "test-handover-secret",
            "ADMIN_EMAIL": ADMIN_EMAIL,
            "ADMIN_PASSWORD_HASH": generate_hash(ADMIN_PASSWORD),
            "DATA_PATH": store.path,
        },
        store=store,
        clock=clock,
    )
    return app


@pytest.fixture
def services(app):
    return app.extensions[EXTENSION_KEY]


@pytest.fixture
def client(app):
    with app.test_client() as c:
        yield c


@pytest.fixture
def vehicle_id(store):
    return store.create_vehicle({
        "brand": "Toyota", "model": "Innova", "year": 2021,
        "daily_rate": "1000", "location": "Hyderabad",
    })


@pytest.fixture
def customer_id(services):
    return services.users.register("Asha", "asha@example.com", "9000000001", "Secret123").customer_id


@pytest.fixture
def other_customer_id(services):
    return services.users.register("Ravi", "ravi@example.com", "9000000002", "Secret123").customer_id


@pytest.fixture
def operator():
    return Caller.operator()


@pytest.fixture
def booking(services, vehicle_id, customer_id):
    """A fresh BOOKED reservation: Innova at 1000/day for 2024-01-01 -> 2024-01-03."""
    return services.ledger.create_reservation(vehicle_id, customer_id, "2024-01-01", "2024-01-03")
