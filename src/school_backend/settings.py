import os
import threading
from dotenv import load_dotenv

load_dotenv()

def _env_flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).lower() in ["true", "1", "yes", "on"]

class BackendSettings:
    _instance = None
    _lock = threading.Lock()

    def __init__(self):
        self.DEBUG_MODE = os.environ.get("DEBUG_MODE","development")
        self.LOG_LEVEL = os.environ.get("LOG_LEVEL","info")

        # Database
        self.POSTGRES_HOST = os.environ.get("POSTGRES_HOST","localhost")
        self.POSTGRES_PORT = os.environ.get("POSTGRES_PORT","5432")
        self.POSTGRES_USER = os.environ.get("POSTGRES_USER","postgres")
        self.POSTGRES_PASSWORD = os.environ.get("POSTGRES_PASSWORD","")
        self.POSTGRES_DB = os.environ.get("POSTGRES_DB","school")
        self.DATABASE_URL = os.environ.get(
            "DATABASE_URL",
            f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )

        # Tokens
        self.JWT_SECRET = os.environ.get("JWT_SECRET","change-me-access")
        self.JWT_REFRESH_SECRET = os.environ.get("JWT_REFRESH_SECRET","change-me-refresh")
        self.JWT_ALGORITHM = os.environ.get("JWT_ALGORITHM","HS256")
        self.JWT_ACCESS_TOKEN_EXPIRE = int(os.environ.get("JWT_ACCESS_TOKEN_EXPIRE","15"))  # minutes
        self.JWT_REFRESH_TOKEN_EXPIRE = int(os.environ.get("JWT_REFRESH_TOKEN_EXPIRE","10080"))  # minutes

        # PII encryption, must be exactly 32 bytes
        self.ENCRYPTION_KEY = os.environ.get("ENCRYPTION_KEY","default_32_byte_key_1234567890!@")

        self.CORS_ALLOWED_ORIGINS = [o.strip() for o in os.environ.get("CORS_ALLOWED_ORIGINS","*").split(",") if o.strip()]

        # Startup behaviour
        self.AUTO_MIGRATE = _env_flag("AUTO_MIGRATE", "true")
        self.AUTO_SEED = _env_flag("AUTO_SEED", "true")

        self.ADMIN_EMAIL = os.environ.get("ADMIN_EMAIL","admin@example.com")
        self.ADMIN_USERNAME = os.environ.get("ADMIN_USERNAME","admin")
        self.ADMIN_PASSWORD = os.environ.get("ADMIN_PASSWORD","Admin12345")

    def __new__(cls):
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super(BackendSettings, cls).__new__(cls)
        return cls._instance

settings = BackendSettings()
