import os
import warnings

from dotenv import load_dotenv

load_dotenv()

# --- Database ---
DB_USER = os.getenv("POSTGRES_USER", "postgres")
DB_PASSWORD = os.getenv("POSTGRES_PASSWORD", "postgres")
DB_HOST = os.getenv("POSTGRES_HOST", "localhost")  # In Docker, this will be 'postgres'
DB_PORT = os.getenv("POSTGRES_PORT", "5432")
DB_NAME = os.getenv("POSTGRES_DB", "scms")

DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"postgresql+asyncpg://{DB_USER}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}",
)
SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() in ("1", "true", "yes")

# --- Auth ---
_JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "")
if not _JWT_SECRET_KEY:
    warnings.warn(
        "JWT_SECRET_KEY is not set. Using an insecure default. "
        "Set this env var in production!",
        stacklevel=2,
    )
    _JWT_SECRET_KEY = "insecure-default-change-me"

JWT_SECRET_KEY: str = _JWT_SECRET_KEY
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "1440"))
SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "session_id")
LOGIN_RATE_LIMIT = os.getenv("LOGIN_RATE_LIMIT", "20/minute")

# --- Observability ---
SERVICE_NAME = os.getenv("SERVICE_NAME", "scms_backend")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
OTLP_ENDPOINT = os.getenv("OTLP_ENDPOINT", "http://localhost:4317")  # empty string disables export

# --- Documents ---
WKHTMLTOPDF_PATH = os.getenv("WKHTMLTOPDF_PATH", "")  # falls back to wkhtmltopdf on PATH
COMPANY_NAME = os.getenv("COMPANY_NAME", "Center Industrial Supply Corporation")
