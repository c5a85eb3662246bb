import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file)
else:
    data = dict()


DEFAULT_RATE_TABLE = {
    "badminton": {"off_peak_rate": "15.00", "peak_rate": "18.00", "peak_start": "18:00"},
    "pickleball": {"off_peak_rate": "25.00"},
}


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./test.db")
    MIGRATION_DB_URI = data.get("MIGRATION_DB_URI", "sqlite:///./test.db")
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    ENABLE_LOGGING_MIDDLEWARE = bool(data.get("ENABLE_LOGGING_MIDDLEWARE", 1))

    # Billing
    BILLING_TIMEZONE = data.get("BILLING_TIMEZONE", "Asia/Kuala_Lumpur")  # Defines the current period
    CURRENCY = data.get("CURRENCY", "MYR")  # Display only
    RATE_TABLE = data.get("RATE_TABLE", DEFAULT_RATE_TABLE)  # sport -> hourly rates
    BULK_PAYMENT_NOTE = data.get("BULK_PAYMENT_NOTE", "Bulk payment for {month}/{year}")

    # Slot Payment Record Generation
    SLOT_RECORDS_ENABLED = bool(data.get("SLOT_RECORDS_ENABLED", True))
    SLOT_RECORDS_INTERVAL_SECONDS = data.get("SLOT_RECORDS_INTERVAL_SECONDS", 86400)  # Daily

    # Payment Reconciliation
    RECONCILIATION_ENABLED = bool(data.get("RECONCILIATION_ENABLED", True))
    RECONCILIATION_INTERVAL_SECONDS = data.get("RECONCILIATION_INTERVAL_SECONDS", 86400)  # Daily
