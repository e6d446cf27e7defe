"""Test package. Environment defaults must be in place before users_api is imported."""

import os

os.environ["APP_ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("JWT_SECRET_KEY", "unit-test-signing-key-0123456789-abcdefghij")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.pop("GATEWAY_SECRET", None)
