# config.py
import os
from pathlib import Path

from dotenv import load_dotenv, find_dotenv

load_dotenv(find_dotenv(), override=False)  # picks up .env locally


# ---- base directories -------------------------------------------------------
BASE_DIR = Path(__file__).resolve().parent
INSTANCE_DIR = os.environ.get("FLASK_INSTANCE_PATH", str(BASE_DIR / "instance"))
os.makedirs(INSTANCE_DIR, exist_ok=True)


# ---- tiny helpers -----------------------------------------------------------
def _to_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return str(value).strip().lower() in {"1", "true", "yes", "on", "y"}


def _database_url() -> str:
    raw = os.getenv("DATABASE_URL", "").strip()

    # Render/Heroku give postgres://; normalize to postgresql+psycopg2://
    if raw.startswith("postgres://"):
        raw = raw.replace("postgres://", "postgresql+psycopg2://", 1)

    if not raw:
        raw = "sqlite:///" + str(Path(INSTANCE_DIR) / "touristlog.db")
    return raw


# ----------------------------------------------------------------------------
class Config:
    """
    Base configuration loaded by the app factory via:
      app.config.from_object("config.Config")
    """

    # ------------ Core / Security ------------
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")

    # shared admin passkey for the dashboard
    ADMIN_PASSKEY = os.getenv("ADMIN_PASSKEY", "")

    # ------------ Database ------------
    SQLALCHEMY_DATABASE_URI = _database_url()
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {"pool_pre_ping": True}

    # create tables on start-up; migrations turn this off
    AUTO_CREATE_TABLES = _to_bool(os.getenv("AUTO_CREATE_TABLES"), default=True)

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    # ------------ Registrations ------------
    # "counter" -> #TL-2025-001, "timestamp" -> #TL-2025-<last 6 digits of epoch ms>
    CONTROL_NUMBER_STRATEGY = os.getenv("CONTROL_NUMBER_STRATEGY", "counter").strip().lower()
    ADMIN_PAGE_SIZE = int(os.getenv("ADMIN_PAGE_SIZE", "10"))
    API_REQUIRE_ADMIN = _to_bool(os.getenv("API_REQUIRE_ADMIN"), default=False)

    # ------------ Mail ------------
    MAIL_SERVER = os.getenv("MAIL_SERVER", "localhost")
    MAIL_PORT = int(os.getenv("MAIL_PORT", "587"))
    MAIL_USE_TLS = _to_bool(os.getenv("MAIL_USE_TLS", "1"))
    MAIL_USE_SSL = _to_bool(os.getenv("MAIL_USE_SSL", "0"))
    MAIL_USERNAME = os.getenv("MAIL_USERNAME", "")
    MAIL_PASSWORD = os.getenv("MAIL_PASSWORD", "")
    MAIL_DEFAULT_SENDER = os.getenv("MAIL_DEFAULT_SENDER", MAIL_USERNAME or "logbook@localhost")
    MAIL_SUPPRESS_SEND = _to_bool(os.getenv("MAIL_SUPPRESS_SEND", "0"), default=False)
    REPORT_TO_EMAIL = os.getenv("REPORT_TO_EMAIL", MAIL_USERNAME)

    # ------------ Cookies ------------
    SESSION_COOKIE_SAMESITE = "Lax"
    SESSION_COOKIE_SECURE = _to_bool(os.getenv("SESSION_COOKIE_SECURE"), default=False)

    # dev default; production can override to https
    PREFERRED_URL_SCHEME = os.getenv("PREFERRED_URL_SCHEME", "http")

    # ------------ wkhtmltopdf ------------
    WKHTMLTOPDF_EXE = os.getenv("WKHTMLTOPDF_EXE", "")


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    ADMIN_PASSKEY = "letmein"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    SQLALCHEMY_ENGINE_OPTIONS = {}
    WTF_CSRF_ENABLED = False
    MAIL_SUPPRESS_SEND = True
    MAIL_DEFAULT_SENDER = "logbook@example.com"
    REPORT_TO_EMAIL = "office@example.com"
    CONTROL_NUMBER_STRATEGY = "counter"
    API_REQUIRE_ADMIN = False
    AUTO_CREATE_TABLES = True
