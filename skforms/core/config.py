"""Application configuration with environment variables."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Environment
    ENV: str = "dev"

    # App Version (format: a.bc.de - major.feature.patch)
    VERSION: str = "0.01.00"

    # Database
    DATABASE_URL: str = "sqlite:///./skforms.db"

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000"

    # Frontend (used for dashboard links in emails)
    FRONTEND_URL: str = "http://localhost:3000"

    # Submission uploads (local disk; served by the frontend under UPLOAD_URL_PREFIX)
    UPLOAD_DIR: str = "./public/uploads/submissions"
    UPLOAD_URL_PREFIX: str = "/uploads/submissions"
    MAX_UPLOAD_BYTES: int = 10 * 1024 * 1024

    # Outbound email (Resend)
    RESEND_API_KEY: str = ""
    EMAIL_FROM: str = ""
    EMAIL_FROM_NAME: str = "Barangay Tulay Casiguran, Sorsogon - SK Program Management"

    # Rate Limiting (requests per minute)
    RATE_LIMIT_API: int = 120
    RATE_LIMIT_PUBLIC_SUBMIT: int = 20
    RATE_LIMIT_PUBLIC_READ: int = 60

    # Reconciliation
    YOUTH_REGISTRATION_MARKER: str = "youth registration"
    DEFAULT_BARANGAY: str = "Tulay"

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS_ORIGINS into a list."""
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @property
    def email_configured(self) -> bool:
        return bool(self.RESEND_API_KEY and self.EMAIL_FROM)


settings = Settings()
