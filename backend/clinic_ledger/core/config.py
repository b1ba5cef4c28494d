from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    APP_NAME: str = "Clinic Ledger"
    version: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    APP_DATABASE_DSN: str = "sqlite:////tmp/clinic_ledger.db"

    # Bearer tokens issued by the clinic login service
    JWT_SECRET: str = "change-me-clinic-ledger-signing-secret"
    JWT_ALGORITHM: str = "HS256"

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:5173"

    # Roles allowed to correct the cash drawer and delete records
    ADMIN_ROLES: list[str] = ["Dueño", "Admin"]

    # Service entry limits
    MAX_SERVICES_PER_ENTRY: int = 30
    ASSISTANT_ALLOWED_SERVICES: list[str] = [
        "Sesión de aclaramiento",
        "Limpieza profunda",
        "Promoción aclaramiento",
    ]
    PATIENT_SEARCH_MIN_LENGTH: int = 2


settings = Settings()
