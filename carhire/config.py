"""
Configuration resolved once at process start.

Order: built-in defaults, then ``CARHIRE_*`` environment variables, then the
mapping handed to ``create_app``. Secrets have no built-in value.
"""
import logging
import secrets

from carhire.exceptions import ConfigurationError
from carhire.models.store import DEFAULT_DATA_PATH
from carhire.utils.constants import DEFAULT_CURRENCY

logger = logging.getLogger(__name__)

ENV_PREFIX = "CARHIRE"

DEFAULTS = {
    "APP_ENV": "development",
    "DATA_PATH": str(DEFAULT_DATA_PATH),
    "CURRENCY": DEFAULT_CURRENCY,
    "PAYEE_VPA": "a6cars@upi",
    "PAYEE_NAME": "A6 Cars",
    "CATALOG_TIMEOUT": 2.0,
    "DISPLAY_TIMEZONE": "Asia/Kolkata",
    "LOG_LEVEL": "INFO",
}

REQUIRED_SECRETS = ("SECRET_KEY", "HANDOVER_SECRET")
ADMIN_SETTINGS = ("ADMIN_EMAIL", "ADMIN_PASSWORD_HASH")


def load_config(app, overrides=None) -> None:
    app.config.from_mapping(DEFAULTS)
    app.config.from_prefixed_env(ENV_PREFIX)
    if overrides:
        app.config.from_mapping(overrides)

    production = str(app.config["APP_ENV"]).lower() in ("production", "prod")
    missing = [k for k in REQUIRED_SECRETS + ADMIN_SETTINGS if not app.config.get(k)]
    if production and missing:
        raise ConfigurationError(f"Missing required settings: {', '.join(missing)}")

    for key in REQUIRED_SECRETS:
        if not app.config.get(key):
            # Sessions and handover tokens will not survive a restart.
            logger.warning("%s not set; using a random per-process value", key)
            app.config[key] = secrets.token_hex(32)
        else:
            # Env values are JSON-decoded, so a numeric secret arrives as an int.
            app.config[key] = str(app.config[key])

    if not (app.config.get("ADMIN_EMAIL") and app.config.get("ADMIN_PASSWORD_HASH")):
        logger.warning("ADMIN_EMAIL/ADMIN_PASSWORD_HASH not set; operator login is disabled")

    app.config["CATALOG_TIMEOUT"] = float(app.config["CATALOG_TIMEOUT"])
