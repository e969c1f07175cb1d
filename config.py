import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./ledger.db")
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    CURRENCY_SYMBOL = data.get("CURRENCY_SYMBOL", "Rs.")

    # Balance engine
    LEDGER_LOCK_TIMEOUT_SECONDS = float(data.get("LEDGER_LOCK_TIMEOUT_SECONDS", 10.0))
    LEDGER_MAX_RETRIES = int(data.get("LEDGER_MAX_RETRIES", 3))
    RECEIPT_MAX_ATTEMPTS = int(data.get("RECEIPT_MAX_ATTEMPTS", 5))

    # Customer notifications (SMS/WhatsApp gateway webhook; unset = log only)
    NOTIFICATION_WEBHOOK_URL = data.get("NOTIFICATION_WEBHOOK_URL", None)

    # Due reminders
    DUE_REMINDER_ENABLED = bool(data.get("DUE_REMINDER_ENABLED", True))
    DUE_REMINDER_INTERVAL_SECONDS = data.get("DUE_REMINDER_INTERVAL_SECONDS", 86400)  # Daily

    # Ledger reconciliation
    RECONCILIATION_ENABLED = bool(data.get("RECONCILIATION_ENABLED", True))
    RECONCILIATION_INTERVAL_SECONDS = data.get("RECONCILIATION_INTERVAL_SECONDS", 86400)  # Daily
