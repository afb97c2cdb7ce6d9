import os

def get_secret(secret_name: str) -> str | None:
    secret_path = f'/run/secrets/{secret_name}'
    try:
        with open(secret_path, 'r', encoding='utf-8') as secret_file:
            return secret_file.read().strip()
    except IOError:
        return os.getenv(secret_name)


DB_PASSWORD = get_secret('db_password')
SECRET_KEY = get_secret('secret_key')

POSTGRES_DB = os.getenv("POSTGRES_DB")
POSTGRES_USER = os.getenv("POSTGRES_USER")
DB_HOST = os.getenv("DB_HOST", "localhost")
DB_PORT = os.getenv("DB_PORT", "5432")
REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")

if POSTGRES_USER and DB_PASSWORD and POSTGRES_DB:
    DATABASE_URL = f"postgresql+asyncpg://{POSTGRES_USER}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{POSTGRES_DB}"
else:
    raise ValueError("Can't build DATABASE_URL")

# tokens are issued by the user service, this service only verifies them
ALGORITHM = "HS256"
JWT_ISSUER = os.getenv("JWT_ISSUER", "ticketing-api")
JWT_AUDIENCE = os.getenv("JWT_AUDIENCE", "ticketing-web")

APP_TIMEZONE = os.getenv("APP_TIMEZONE", "UTC")
STATE_SWEEP_DEBOUNCE_SECONDS = int(os.getenv("STATE_SWEEP_DEBOUNCE_SECONDS", "300"))
STATE_SWEEP_MINUTE = int(os.getenv("STATE_SWEEP_MINUTE", "1"))
STATE_SWEEP_KEY = os.getenv("STATE_SWEEP_KEY", "boxoffice:state-sweep:last")

DEFAULT_CURRENCY = os.getenv("DEFAULT_CURRENCY", "EUR")
MAX_TICKETS_PER_PURCHASE = int(os.getenv("MAX_TICKETS_PER_PURCHASE", "6"))
TIME_CONFLICT_HOURS = 4

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
