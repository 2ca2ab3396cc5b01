"""
Operator-only endpoints must be protected from anonymous callers and customers.
"""
import pytest

OPERATOR_ENDPOINTS = [
    ("get", "/api/admin/bookings"),
    ("post", "/api/admin/bookings/1/confirm-payment"),
    ("post", "/api/admin/bookings/1/verify"),
    ("post", "/api/admin/handover"),
]


@pytest.mark.parametrize("method,path", OPERATOR_ENDPOINTS)
def test_operator_pages_require_login(client, method, path):
    r = getattr(client, method)(path)
    assert r.status_code == 401
    assert r.get_json()["error"] == "unauthorized"


@pytest.mark.parametrize("method,path", OPERATOR_ENDPOINTS)
def test_operator_pages_reject_customers(client, method, path):
    client.post("/api/register", json={
        "name": "Asha", "email": "asha@example.com", "phone": "1", "password": "Secret123"})
    client.post("/api/login", json={"email": "asha@example.com", "password": "Secret123"})
    r = getattr(client, method)(path)
    assert r.status_code == 403


def test_booking_requires_customer(client):
    assert client.post("/api/bookings", json={}).status_code == 401
    assert client.get("/api/bookings/1").status_code == 401
