import os
from pathlib import Path
from dotenv import load_dotenv
from fastapi.security import HTTPBearer

BASE_DIR = Path(__file__).resolve().parent.parent  # -> project root

# Load .env explicitly from project root
load_dotenv(BASE_DIR / ".env")

MIN_REQUIRED_APPROVALS = 2


def _required_approvals() -> int:
    value = int(os.getenv("REQUIRED_APPROVALS", MIN_REQUIRED_APPROVALS))
    if value < MIN_REQUIRED_APPROVALS:
        raise ValueError(f"REQUIRED_APPROVALS must be at least {MIN_REQUIRED_APPROVALS}, got {value}")
    return value


class Settings:
    PROJECT_NAME = "Alumni Membership Backend"
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    FIREBASE_CREDENTIALS_FILE = os.getenv("FIREBASE_CREDENTIALS_FILE")
    FIREBASE_PROJECT_ID = os.getenv("FIREBASE_PROJECT_ID")

    SPACES_REGION = os.getenv("SPACES_REGION")
    SPACES_ENDPOINT = os.getenv("SPACES_ENDPOINT")
    SPACES_KEY = os.getenv("SPACES_KEY")
    SPACES_SECRET = os.getenv("SPACES_SECRET")
    SPACES_NAME = os.getenv("SPACES_NAME")
    SPACES_CDN_URL = (os.getenv("SPACES_CDN_URL") or "").rstrip("/")
    SPACES_BASE_PATH = (os.getenv("SPACES_BASE_PATH") or "alumni").strip("/")
    MAX_DOCUMENT_BYTES = int(os.getenv("MAX_DOCUMENT_BYTES", 10 * 1024 * 1024))
    MAX_PHOTO_BYTES = int(os.getenv("MAX_PHOTO_BYTES", 5 * 1024 * 1024))

    SMTP_HOST = os.getenv("SMTP_HOST", "smtp.gmail.com")
    SMTP_PORT = int(os.getenv("SMTP_PORT", 587))
    SMTP_USER = os.getenv("SMTP_USER")
    SMTP_PASS = os.getenv("SMTP_PASS")
    SMTP_FROM = os.getenv("SMTP_FROM") or os.getenv("SMTP_USER")
    SMTP_USE_TLS = os.getenv("SMTP_USE_TLS", "true").lower() == "true"
    APP_URL = os.getenv("APP_URL", "http://localhost:3000")

    REQUIRED_APPROVALS = _required_approvals()

    bearer_scheme = HTTPBearer(auto_error=False)
    cors_origins = [
        origin.strip()
        for origin in os.getenv("CORS_ORIGINS", "*").split(",")
        if origin.strip()
    ]


settings = Settings()
