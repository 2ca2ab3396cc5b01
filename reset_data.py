"""
reset_data.py
-------------
Utility script to clear all stored data (customers, vehicles, bookings,
payments) from the configured data file.

This script is designed for development and testing purposes.

Usage:
    $ python reset_data.py

After running this script, you can repopulate sample data by executing:
    $ python seeds.py
"""

from carhire import create_app
from carhire.services.container import current_services


def main():
    app = create_app()
    with app.app_context():
        store = current_services().store
        store.clear()
        print(f"{store.path} has been cleared.")
        print("Tip: Run `python seeds.py` to regenerate demo data.")


if __name__ == "__main__":
    main()
