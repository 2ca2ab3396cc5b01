"""Wires the booking services together for one application instance."""

from dataclasses import dataclass

from flask import current_app

from carhire.models.store import Store
from carhire.services.booking_service import BookingLedger
from carhire.services.common import Clock, utc_now
from carhire.services.handover_service import HandoverVerifier
from carhire.services.payment_service import PaymentIntentManager
from carhire.services.user_service import UserService
from carhire.services.vehicle_service import VehicleService
from carhire.services.verification_service import VerificationAuthority
from carhire.utils.tokens import HandoverTokenCodec

EXTENSION_KEY = "carhire"


@dataclass
class Services:
    store: Store
    clock: Clock
    catalog: VehicleService
    users: UserService
    ledger: BookingLedger
    payments: PaymentIntentManager
    verification: VerificationAuthority
    handover: HandoverVerifier


def build_services(config, store: Store = None, clock: Clock = utc_now) -> Services:
    store = store or Store(config["DATA_PATH"])
    codec = HandoverTokenCodec(config["HANDOVER_SECRET"])
    catalog = VehicleService(store, timeout=config["CATALOG_TIMEOUT"])
    ledger = BookingLedger(store, catalog, clock=clock, currency=config["CURRENCY"])
    return Services(
        store=store,
        clock=clock,
        catalog=catalog,
        users=UserService(store, clock=clock),
        ledger=ledger,
        payments=PaymentIntentManager(store, ledger, payee_vpa=config["PAYEE_VPA"],
                                      payee_name=config["PAYEE_NAME"], clock=clock),
        verification=VerificationAuthority(store, ledger, catalog, codec, clock=clock),
        handover=HandoverVerifier(store, ledger, codec,
                                  display_timezone=config["DISPLAY_TIMEZONE"]),
    )


def current_services() -> Services:
    return current_app.extensions[EXTENSION_KEY]
