# contact_relay/core/settings.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import AliasChoices, Field
from typing import List, Optional

DEFAULT_CORS_ORIGINS = "https://portfolio-zeta-flax-88.vercel.app,http://localhost:3000"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
        populate_by_name=True,
        frozen=True,
    )

    api_title: str = Field(default="Portfolio Contact API", alias="API_TITLE")

    # "production" hides error details from responses; anything else exposes them
    app_env: str = Field(
        default="production",
        validation_alias=AliasChoices("APP_ENV", "NODE_ENV"),
    )

    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=5000, alias="PORT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    cors_origins: str = Field(default=DEFAULT_CORS_ORIGINS, alias="CORS_ORIGINS")

    smtp_host: str = Field(default="localhost", alias="EMAIL_HOST")
    smtp_port: int = Field(default=587, alias="EMAIL_PORT")
    smtp_user: Optional[str] = Field(default=None, alias="EMAIL_USER")
    smtp_password: Optional[str] = Field(default=None, alias="EMAIL_PASS")
    # Implicit TLS (usually port 465). Otherwise STARTTLS is used when offered.
    smtp_use_ssl: bool = Field(default=False, alias="EMAIL_USE_SSL")
    # Seconds; unset means the socket blocks until the relay answers
    smtp_timeout: Optional[float] = Field(default=None, alias="EMAIL_TIMEOUT")
    smtp_verify_on_startup: bool = Field(default=True, alias="EMAIL_VERIFY_ON_STARTUP")

    mail_from_name: str = Field(default="Portfolio Contact", alias="EMAIL_FROM_NAME")
    mail_from: Optional[str] = Field(default=None, alias="EMAIL_FROM")
    mail_to: Optional[str] = Field(default=None, alias="RECEIVER_EMAIL")

    contact_rate_limit: str = Field(default="10/15 minutes", alias="CONTACT_RATE_LIMIT")
    max_body_bytes: int = Field(default=10 * 1024, alias="MAX_BODY_BYTES")

    @property
    def allowed_origins(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def expose_errors(self) -> bool:
        return self.app_env.strip().lower() != "production"

    @property
    def sender_address(self) -> Optional[str]:
        return self.mail_from or self.smtp_user


settings = Settings()
