import copy
import logging
import os
import pickle
import threading
from contextlib import contextmanager
from decimal import Decimal
from pathlib import Path

from carhire.exceptions import CatalogUnavailableError
from carhire.utils.constants import IntentStatus

logger = logging.getLogger(__name__)

# ---- Paths ----
BASE_DIR = Path(__file__).resolve().parents[2]
DEFAULT_DATA_PATH = BASE_DIR / "data.pkl"

TABLES = ("customers", "vehicles", "reservations", "payment_intents")


class IntegrityError(Exception):
    """Raised when a write would break a uniqueness constraint of the store."""


class Store:
    """
    Pickle-backed tables guarded by one re-entrant lock.

    All writes go through ``transaction()``: the lock is held for the whole
    body, the tables are snapshotted on entry and restored on any exception,
    and the file is replaced atomically only when the outermost transaction
    commits.
    """

    def __init__(self, path: str | os.PathLike | None = None):
        self.path = str(path or DEFAULT_DATA_PATH)
        self.customers: dict[int, dict] = {}
        self.vehicles: dict[int, dict] = {}
        self.reservations: dict[int, dict] = {}
        self.payment_intents: dict[int, dict] = {}
        self.sequences: dict[str, int] = {name: 0 for name in TABLES}
        self._rw = threading.RLock()
        self._depth = 0

        logger.info("Using data file %s", self.path)
        self._load()

    # ---------- Persistence ----------
    def _load(self):
        """Load data from the pickle file, or start empty if unavailable or invalid."""
        if not os.path.exists(self.path):
            return
        try:
            with open(self.path, "rb") as f:
                data = pickle.load(f)
        except (OSError, pickle.UnpicklingError, EOFError) as e:
            logger.warning("Load failed (%s); starting empty.", e)
            return

        if isinstance(data, dict):
            for name in TABLES:
                setattr(self, name, data.get(name, {}) or {})
            self.sequences.update(data.get("sequences") or {})
            logger.info(
                "Loaded: customers=%d, vehicles=%d, reservations=%d, payment_intents=%d",
                len(self.customers), len(self.vehicles),
                len(self.reservations), len(self.payment_intents),
            )
        else:
            # Incompatible data format: back up the old file and start empty
            bak = self.path + ".bak"
            os.replace(self.path, bak)
            logger.warning("Incompatible store (%s); backed up to %s. Starting empty.",
                           type(data).__name__, bak)

    def _snapshot(self) -> dict:
        payload = {name: getattr(self, name) for name in TABLES}
        payload["sequences"] = self.sequences
        return payload

    def _dump(self):
        """Write the in-memory data to the pickle file safely (atomic replace)."""
        os.makedirs(os.path.dirname(self.path) or ".", exist_ok=True)
        tmp = self.path + ".tmp"
        with open(tmp, "wb") as f:
            pickle.dump(self._snapshot(), f, protocol=pickle.HIGHEST_PROTOCOL)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp, self.path)

    def save(self):
        """Thread-safe save method."""
        with self._rw:
            self._dump()

    def clear(self):
        with self.transaction():
            for name in TABLES:
                getattr(self, name).clear()
                self.sequences[name] = 0

    # ---------- Transactions ----------
    @contextmanager
    def transaction(self):
        """
        Scoped unit of work. Nested transactions join the outermost one, so a
        service can call store helpers that open their own transaction.
        """
        with self._rw:
            if self._depth:
                self._depth += 1
                try:
                    yield self
                finally:
                    self._depth -= 1
                return

            before = copy.deepcopy(self._snapshot())
            self._depth = 1
            try:
                yield self
                self._dump()
            except BaseException:
                for name in TABLES:
                    setattr(self, name, before[name])
                self.sequences = before["sequences"]
                logger.warning("Transaction rolled back")
                raise
            finally:
                self._depth = 0

    @contextmanager
    def reading(self, timeout: float | None = None):
        """Hold the store lock for a consistent read, waiting at most ``timeout`` seconds."""
        acquired = self._rw.acquire(timeout=-1 if timeout is None else timeout)
        if not acquired:
            raise CatalogUnavailableError(f"Error: store busy for more than {timeout}s")
        try:
            yield self
        finally:
            self._rw.release()

    def next_id(self, table: str) -> int:
        with self.transaction():
            self.sequences[table] = self.sequences.get(table, 0) + 1
            return self.sequences[table]

    # ---------- Customers ----------
    def find_customer(self, email: str) -> dict | None:
        """Find a customer by email (case-insensitive)."""
        wanted = (email or "").strip().lower()
        for c in self.customers.values():
            if c["email"] == wanted:
                return c
        return None

    def get_customer(self, customer_id: int) -> dict | None:
        return self.customers.get(customer_id)

    def create_customer(self, name: str, email: str, phone: str, password_hash: str,
                        created_at: str | None = None) -> int:
        """Create a new customer and return its ID."""
        with self.transaction():
            if self.find_customer(email):
                raise IntegrityError("Email already registered")
            cid = self.next_id("customers")
            self.customers[cid] = {
                "customer_id": cid,
                "name": name,
                "email": email.strip().lower(),
                "phone": phone,
                "password_hash": password_hash,
                "created_at": created_at,
            }
            return cid

    # ---------- Vehicles ----------
    def create_vehicle(self, data: dict) -> int:
        """Create a new vehicle record and return its ID."""
        with self.transaction():
            vid = self.next_id("vehicles")
            self.vehicles[vid] = {
                "vehicle_id": vid,
                "brand": data.get("brand", ""),
                "model": data.get("model", ""),
                "year": data.get("year"),
                "daily_rate": Decimal(str(data["daily_rate"])),
                "location": data.get("location", ""),
                "image_url": data.get("image_url"),
            }
            return vid

    def get_vehicle(self, vehicle_id: int) -> dict | None:
        return self.vehicles.get(vehicle_id)

    # ---------- Reservations ----------
    def insert_reservation(self, r: dict) -> dict:
        with self.transaction():
            rid = self.next_id("reservations")
            r = dict(r, reservation_id=rid)
            self.reservations[rid] = r
            return r

    def get_reservation(self, rid: int) -> dict | None:
        return self.reservations.get(rid)

    def find_reservation_by_key(self, key: str) -> dict | None:
        for r in self.reservations.values():
            if r.get("idempotency_key") == key:
                return r
        return None

    def update_reservation(self, rid: int, updates: dict) -> bool:
        with self.transaction():
            if rid not in self.reservations:
                return False
            self.reservations[rid].update(updates)
            return True

    # ---------- Payment intents ----------
    def active_intent_for(self, reservation_id: int) -> dict | None:
        """Intents are never superseded, so any intent for the reservation is active."""
        for pi in self.payment_intents.values():
            if pi["reservation_id"] == reservation_id:
                return pi
        return None

    def insert_intent(self, pi: dict) -> dict:
        with self.transaction():
            if self.active_intent_for(pi["reservation_id"]) is not None:
                raise IntegrityError(
                    f"reservation {pi['reservation_id']} already has an active payment intent")
            iid = self.next_id("payment_intents")
            pi = dict(pi, intent_id=iid)
            pi.setdefault("status", IntentStatus.PENDING)
            self.payment_intents[iid] = pi
            return pi

    def update_intent(self, iid: int, updates: dict) -> bool:
        with self.transaction():
            if iid not in self.payment_intents:
                return False
            self.payment_intents[iid].update(updates)
            return True
