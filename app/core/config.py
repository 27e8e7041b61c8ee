# app/core/config.py
import os
from typing import List
from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()

def _default_database_url() -> str:
    url = os.getenv("DATABASE_URL")
    if url:
        return url
    data_dir = os.path.abspath(os.getenv("DATA_DIR", "./data"))
    os.makedirs(data_dir, exist_ok=True)
    return f"sqlite:///{os.path.join(data_dir, 'checkin.db')}"

def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}

def _env_list(name: str, default: str) -> List[str]:
    return [item.strip() for item in os.getenv(name, default).split(",") if item.strip()]

class Settings(BaseModel):
    PROJECT_NAME: str = Field(default_factory=lambda: os.getenv("PROJECT_NAME", "Event Check-In API"))
    ENVIRONMENT: str = Field(default_factory=lambda: os.getenv("ENVIRONMENT", "development"))
    LOG_LEVEL: str = Field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))

    DATABASE_URL: str = Field(default_factory=_default_database_url)
    RUN_MIGRATIONS_ON_STARTUP: bool = Field(default_factory=lambda: _env_bool("RUN_MIGRATIONS_ON_STARTUP", "true"))

    SECRET_KEY: str = Field(default_factory=lambda: os.getenv("SECRET_KEY", "CHANGE_ME_SUPER_SECRET_AT_LEAST_32_CHARS"))
    ALGORITHM: str = Field(default_factory=lambda: os.getenv("ALGORITHM", "HS256"))
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default_factory=lambda: int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "15")))
    REFRESH_TOKEN_EXPIRE_DAYS: int = Field(default_factory=lambda: int(os.getenv("REFRESH_TOKEN_EXPIRE_DAYS", "7")))

    # primeiro esquema gera hashes novos; os seguintes só verificam hashes antigos
    PASSWORD_SCHEMES: List[str] = Field(default_factory=lambda: _env_list("PASSWORD_SCHEMES", "argon2,bcrypt_sha256,bcrypt"))
    ARGON2_TIME_COST: int = Field(default_factory=lambda: int(os.getenv("ARGON2_TIME_COST", "2")))
    ARGON2_MEMORY_COST: int = Field(default_factory=lambda: int(os.getenv("ARGON2_MEMORY_COST", "19456")))

    # fuso usado para calcular o "dia" de um check-in
    CHECKIN_TIMEZONE: str = Field(default_factory=lambda: os.getenv("CHECKIN_TIMEZONE", "Africa/Nairobi"))

    VOTER_LOOKUP_API_URL: str = Field(default_factory=lambda: os.getenv("VOTER_LOOKUP_API_URL", ""))
    VOTER_LOOKUP_API_TOKEN: str = Field(default_factory=lambda: os.getenv("VOTER_LOOKUP_API_TOKEN", ""))
    VOTER_LOOKUP_TIMEOUT_SECONDS: float = Field(default_factory=lambda: float(os.getenv("VOTER_LOOKUP_TIMEOUT_SECONDS", "10")))

    CORS_ORIGINS: List[str] = Field(default_factory=lambda: _env_list("CORS_ORIGINS", "*"))

    SEED_SUPERADMIN_EMAIL: str = Field(default_factory=lambda: os.getenv("SEED_SUPERADMIN_EMAIL", "admin@example.com"))
    SEED_SUPERADMIN_PASSWORD: str = Field(default_factory=lambda: os.getenv("SEED_SUPERADMIN_PASSWORD", "change-me-now"))

    REPORT_TITLE: str = Field(default_factory=lambda: os.getenv("REPORT_TITLE", "Event Attendance Report"))

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

settings = Settings()
