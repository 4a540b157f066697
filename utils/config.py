"""
Environment-driven settings for the Workforce API
"""
import os


def _get_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# Database
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./workforce.db")

# JWT Configuration
SECRET_KEY = os.getenv("SECRET_KEY", "change-this-secret-key-in-production")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))
RESET_TOKEN_EXPIRE_MINUTES = int(os.getenv("RESET_TOKEN_EXPIRE_MINUTES", "30"))

# Sign-up with this code grants the manager role
MANAGER_ACCESS_CODE = os.getenv("MANAGER_ACCESS_CODE", "")

# Whether managers may file incident reports themselves
MANAGERS_CAN_REPORT_INCIDENTS = _get_bool("MANAGERS_CAN_REPORT_INCIDENTS", True)

# Object storage
UPLOAD_DIR = os.getenv("UPLOAD_DIR", "uploads")
MEDIA_URL_PREFIX = os.getenv("MEDIA_URL_PREFIX", "/media")

CORS_ORIGINS = [origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()]

# Summarization models
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-3.5-turbo")
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-1.5-flash")

# Outgoing mail
SMTP_HOST = os.getenv("SMTP_HOST")
SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
SMTP_USER = os.getenv("SMTP_USER")
SMTP_PASSWORD = os.getenv("SMTP_PASSWORD")
MAIL_FROM = os.getenv("MAIL_FROM", "no-reply@workforce.local")
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:3000")
