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
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./data/invoice_tracker.db")
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    ENABLE_LOGGING_MIDDLEWARE = bool(data.get("ENABLE_LOGGING_MIDDLEWARE", 1))
    ENABLE_SENTRY = data.get("ENABLE_SENTRY", 0)
    DSN_SENTRY = data.get("DSN_SENTRY", "")
    SENTRY_ENVIRONMENT = data.get("SENTRY_ENVIRONMENT", "dev")

    # Callback authentication: "bearer", "api_key" or "any"
    CALLBACK_SECRET = data.get("CALLBACK_SECRET", "")
    CALLBACK_AUTH_MODE = data.get("CALLBACK_AUTH_MODE", "any")

    # External PDF generation workflow
    WORKFLOW_WEBHOOK_URL = data.get("WORKFLOW_WEBHOOK_URL", "")
    WORKFLOW_WEBHOOK_TOKEN = data.get("WORKFLOW_WEBHOOK_TOKEN", "")
    WORKFLOW_TIMEOUT_SECONDS = data.get("WORKFLOW_TIMEOUT_SECONDS", 30.0)
    WORKFLOW_SOURCE = data.get("WORKFLOW_SOURCE", "invoice-tracker")

    # Status polling defaults (overridden per call site by named profiles)
    POLL_INTERVAL_SECONDS = data.get("POLL_INTERVAL_SECONDS", 2.0)
    POLL_MAX_ATTEMPTS = data.get("POLL_MAX_ATTEMPTS", 60)

    # Age-based cleanup
    SWEEP_MAX_AGE_HOURS = data.get("SWEEP_MAX_AGE_HOURS", 24)
    SWEEP_INTERVAL_SECONDS = data.get("SWEEP_INTERVAL_SECONDS", 3600)
