from datetime import timedelta
import os
from dotenv import load_dotenv

load_dotenv()


def _optional_int(name):
    value = os.environ.get(name)
    return int(value) if value else None


class Config:
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL", "sqlite:///grocery.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    JWT_SECRET_KEY = os.environ.get("JWT_SECRET_KEY")
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=24)

    # store owner account that places every auto-generated replenishment order
    AUTO_ORDER_STORE_OWNER_ID = _optional_int("AUTO_ORDER_STORE_OWNER_ID")

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    JWT_SECRET_KEY = "test-secret-key-with-enough-length-for-hs256"
    AUTO_ORDER_STORE_OWNER_ID = None
    LOG_LEVEL = "WARNING"
    BCRYPT_LOG_ROUNDS = 4
