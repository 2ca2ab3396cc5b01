"""
End-to-end flow over HTTP: customer registers, books and pays; operator
confirms the payment, mints the handover token and redeems it at pickup.
"""
import pytest

from conftest import ADMIN_EMAIL, ADMIN_PASSWORD


def _register_and_login(client, email="asha@example.com"):
    r = client.post("/api/register", json={
        "name": "Asha", "email": email, "phone": "9000000001", "password": "Secret123"})
    assert r.status_code == 201, r.get_json()
    r = client.post("/api/login", json={"email": email, "password": "Secret123"})
    assert r.status_code == 200, r.get_json()
    return r.get_json()["user"]["id"]


def _admin_login(client):
    r = client.post("/api/admin/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert r.status_code == 200, r.get_json()


def test_full_flow_book_pay_verify_collect(client, vehicle_id):
    _register_and_login(client)

    r = client.post("/api/bookings", json={
        "car_id": vehicle_id, "start_date": "2024-01-01", "end_date": "2024-01-03"})
    assert r.status_code == 201, r.get_json()
    booking = r.get_json()
    bid = booking["id"]
    assert booking["status"] == "BOOKED"
    assert booking["amount"] == "2000.00"

    r = client.post(f"/api/bookings/{bid}/pay")
    assert r.status_code == 201, r.get_json()
    body = r.get_json()
    assert body["payment"]["status"] == "pending"
    assert body["upi_uri"].startswith("upi://pay?")
    assert body["qr_svg"].startswith("<svg")

    r = client.get("/api/bookings")
    assert [b["status"] for b in r.get_json()] == ["PENDING_PAYMENT"]

    client.post("/api/logout")
    _admin_login(client)

    r = client.get("/api/admin/bookings?status=pending_payment")
    assert [b["id"] for b in r.get_json()] == [bid]

    r = client.post(f"/api/admin/bookings/{bid}/confirm-payment")
    assert r.status_code == 200, r.get_json()
    assert r.get_json()["booking"]["status"] == "PAID"

    r = client.post(f"/api/admin/bookings/{bid}/verify")
    assert r.status_code == 200, r.get_json()
    token = r.get_json()["handover_token"]
    assert r.get_json()["status"] == "VERIFIED"

    r = client.post(f"/api/admin/bookings/{bid}/verify")
    assert r.status_code == 409
    assert r.get_json()["error"] == "invalid_transition"

    r = client.get(f"/api/bookings/{bid}")
    assert r.get_json()["handover_token"] == token
    assert r.get_json()["payment"]["status"] == "verified"

    r = client.post("/api/admin/handover", json={"token": token})
    assert r.status_code == 200, r.get_json()
    confirmation = r.get_json()
    assert confirmation["booking_id"] == bid
    assert confirmation["customer_name"] == "Asha"
    assert confirmation["collected_at_local"] == "01/12/2023 15:30"

    r = client.post("/api/admin/handover", json={"token": token})
    assert r.status_code == 409


def test_idempotency_key_header(client, vehicle_id):
    _register_and_login(client)
    payload = {"car_id": vehicle_id, "start_date": "2024-01-01", "end_date": "2024-01-03"}
    first = client.post("/api/bookings", json=payload, headers={"Idempotency-Key": "k1"})
    second = client.post("/api/bookings", json=payload, headers={"Idempotency-Key": "k1"})
    assert first.get_json()["id"] == second.get_json()["id"]


def test_tampered_token_is_rejected(client, vehicle_id):
    _admin_login(client)
    r = client.post("/api/admin/handover", json={"token": "eyJyaWQiOjF9.bogus"})
    assert r.status_code == 422
    assert r.get_json()["error"] == "token_mismatch"


def test_error_kinds_are_reported(client, vehicle_id):
    _register_and_login(client)
    r = client.post("/api/bookings", json={"car_id": 999, "start_date": "2024-01-01",
                                           "end_date": "2024-01-03"})
    assert r.status_code == 404
    assert r.get_json()["error"] == "vehicle_not_found"

    r = client.post("/api/bookings", json={"car_id": vehicle_id, "start_date": "2024-01-03",
                                           "end_date": "2024-01-01"})
    assert r.status_code == 400
    assert r.get_json()["error"] == "invalid_range"

    r = client.post("/api/bookings/123/pay")
    assert r.status_code == 404
    assert r.get_json()["error"] == "not_found"


def test_customer_cannot_see_or_pay_others_booking(client, vehicle_id):
    _register_and_login(client)
    bid = client.post("/api/bookings", json={
        "car_id": vehicle_id, "start_date": "2024-01-01", "end_date": "2024-01-03"}).get_json()["id"]
    client.post("/api/logout")

    _register_and_login(client, email="ravi@example.com")
    assert client.get(f"/api/bookings/{bid}").status_code == 403
    r = client.post(f"/api/bookings/{bid}/pay")
    assert r.status_code == 403
    assert r.get_json()["error"] == "forbidden"


def test_catalog_browsing(client, vehicle_id, store):
    store.create_vehicle({"brand": "Mahindra", "model": "Thar", "daily_rate": "3000",
                          "location": "Vijayawada"})
    cars = client.get("/api/cars").get_json()
    assert [c["brand"] for c in cars] == ["Toyota", "Mahindra"]

    cars = client.get("/api/cars?location=vijay").get_json()
    assert [c["model"] for c in cars] == ["Thar"]

    cars = client.get("/api/cars?min=3000&max=1000").get_json()
    assert len(cars) == 2

    r = client.get(f"/api/cars/{vehicle_id}")
    assert r.get_json()["descriptor"] == "Toyota Innova (2021)"
    assert client.get("/api/cars/42").status_code == 404


@pytest.mark.parametrize("token", [12345, {"rid": 1}, ["x"], "   "])
def test_handover_rejects_non_string_token(client, token):
    _admin_login(client)
    r = client.post("/api/admin/handover", json={"token": token})
    assert r.status_code == 400
    assert r.get_json()["error"] == "validation_error"


@pytest.mark.parametrize("car_id", [True, 1.5])
def test_booking_rejects_non_integer_car_id(client, vehicle_id, car_id):
    _register_and_login(client)
    r = client.post("/api/bookings", json={"car_id": car_id, "start_date": "2024-01-01",
                                           "end_date": "2024-01-03"})
    assert r.status_code == 400
    assert r.get_json()["error"] == "validation_error"
