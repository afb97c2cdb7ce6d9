import os

os.environ.setdefault("POSTGRES_DB", "boxoffice_test")
os.environ.setdefault("POSTGRES_USER", "boxoffice")
os.environ.setdefault("db_password", "test-password")
os.environ.setdefault("secret_key", "test-secret")
os.environ.setdefault("APP_TIMEZONE", "UTC")
