import os
from datetime import timedelta
from pathlib import Path
from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent  # project root (where wsgi.py is)
load_dotenv(BASE_DIR / ".env")


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", f"sqlite:///{BASE_DIR / 'voting_ledger.db'}")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Tokens are issued by the auth service; we only verify them
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "jwt-dev-secret")
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(
        minutes=int(os.getenv("JWT_ACCESS_TOKEN_EXPIRES_MIN", "30"))
    )

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    # Decimal places for result percentages
    RESULTS_PRECISION = int(os.getenv("RESULTS_PRECISION", "2"))

    SWAGGER = {"title": "Campus Voting Ledger API", "uiversion": 3}


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    JWT_SECRET_KEY = "test-jwt-secret-that-is-long-enough-for-hs256"
    LOG_LEVEL = "DEBUG"
