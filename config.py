import os
from datetime import timedelta

from dotenv import load_dotenv

# === Load environment variables ===
load_dotenv()


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY")

    # Local SQLite file, used whenever PG_HOST is not set
    DATABASE = os.getenv("DATABASE", "calendar.db")

    PG_HOST = os.getenv("PG_HOST")
    PG_PORT = int(os.getenv("PG_PORT", "5432"))
    PG_USER = os.getenv("PG_USER")
    PG_PASSWORD = os.getenv("PG_PASSWORD")
    PG_DATABASE = os.getenv("PG_DATABASE")
    PG_SSLMODE = os.getenv("PG_SSLMODE", "require")
    PG_POOL_MIN = int(os.getenv("PG_POOL_MIN", "1"))
    PG_POOL_MAX = int(os.getenv("PG_POOL_MAX", "10"))

    PASSWORD_HASH_METHOD = os.getenv("PASSWORD_HASH_METHOD", "scrypt:16384:8:1")

    PERMANENT_SESSION_LIFETIME = timedelta(hours=24)
    SESSION_COOKIE_HTTPONLY = True

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    PORT = int(os.getenv("PORT", "3000"))
