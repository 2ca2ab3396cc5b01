from carhire import create_app
from carhire.exceptions import ValidationError
from carhire.services.container import current_services

DEMO_VEHICLES = [
    {"brand": "Toyota", "model": "Innova Crysta", "year": 2022, "daily_rate": "2500",
     "location": "Hyderabad", "image_url": "/uploads/innova.jpg"},
    {"brand": "Maruti Suzuki", "model": "Swift", "year": 2021, "daily_rate": "1200",
     "location": "Hyderabad", "image_url": "/uploads/swift.jpg"},
    {"brand": "Hyundai", "model": "Creta", "year": 2023, "daily_rate": "2000",
     "location": "Vijayawada", "image_url": "/uploads/creta.jpg"},
    {"brand": "Mahindra", "model": "Thar", "year": 2022, "daily_rate": "3000",
     "location": "Vijayawada", "image_url": "/uploads/thar.jpg"},
]


def main():
    app = create_app()
    with app.app_context():
        svc = current_services()
        store = svc.store

        # ---- Demo customer (idempotent) ----
        try:
            svc.users.register("Demo Customer", "customer@a6cars.com", "9000000000", "Customer123")
        except ValidationError:
            pass

        # ---- Demo vehicles (create only if none exist) ----
        if not store.vehicles:
            for v in DEMO_VEHICLES:
                store.create_vehicle(v)

        store.save()

        print("Seed complete.")
        print("Customer login:  customer@a6cars.com / Customer123")
        print("Operator login:  set CARHIRE_ADMIN_EMAIL and CARHIRE_ADMIN_PASSWORD_HASH")


if __name__ == "__main__":
    main()
