import logging

from flask import Flask, jsonify

from .config import load_config
from .controllers.admin import bp as admin_bp
from .controllers.auth import bp as auth_bp
from .controllers.bookings import bp as bookings_bp
from .controllers.vehicles import bp as vehicles_bp
from .exceptions import BookingError
from .services.common import utc_now
from .services.container import EXTENSION_KEY, build_services


def create_app(config=None, store=None, clock=None):
    app = Flask(__name__)
    load_config(app, config)
    logging.getLogger("carhire").setLevel(app.config["LOG_LEVEL"])

    app.extensions[EXTENSION_KEY] = build_services(app.config, store=store, clock=clock or utc_now)

    app.register_blueprint(auth_bp)
    app.register_blueprint(vehicles_bp)
    app.register_blueprint(bookings_bp)
    app.register_blueprint(admin_bp)

    @app.errorhandler(BookingError)
    def handle_booking_error(err: BookingError):
        app.logger.info("%s: %s", err.kind, err.message)
        return jsonify(err.to_dict()), err.status_code

    @app.get("/")
    def index():
        return "A6 Cars Rental API is running!"

    return app
