"""Test package. Points the app at an in-memory SQLite database before anything imports it."""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret-key-for-the-library-api-suite"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["APP_ENV"] = "dev"
os.environ["DEBUG"] = "false"
os.environ["API_PREFIX"] = "/api"
