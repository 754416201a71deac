import logging
from typing import Annotated, List, Union, Any, Optional, Dict
from pydantic import PostgresDsn, Field, field_validator, SecretStr, computed_field
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict
from google.cloud import secretmanager
from google.api_core.exceptions import NotFound
import os

logger = logging.getLogger(__name__)

SECRET_IDS = [
    'DATABASE_URL', 'POSTGRES_SERVER', 'POSTGRES_USER', 'POSTGRES_PASSWORD', 'POSTGRES_DB',
    'EMAIL_API', 'SENDER_EMAIL', 'ADMIN_EMAIL',
]


def get_secrets() -> Optional[dict[str, str]]:
    project_id = os.getenv('GOOGLE_CLOUD_PROJECT')
    if not project_id:
        return None

    client = secretmanager.SecretManagerServiceClient()
    secrets = {}
    for secret_id in SECRET_IDS:
        try:
            name = f"projects/{project_id}/secrets/{secret_id}/versions/latest"
            response = client.access_secret_version(request={"name": name})
            secrets[secret_id] = response.payload.data.decode("UTF-8")
        except NotFound:
            logger.warning(f"Secret {secret_id} not found in GCP Secret Manager.")
    return secrets


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    PROJECT_NAME: str = "Noticias Pachuca"
    ENVIRONMENT: str = Field(default="development")
    GOOGLE_CLOUD_PROJECT: Optional[str] = None

    # NoDecode hands the raw env string to assemble_cors_origins
    BACKEND_CORS_ORIGINS: Annotated[List[str], NoDecode] = [
        "http://localhost:3000",
        "https://noticiaspachuca.com",
        "https://www.noticiaspachuca.com",
    ]

    POSTGRES_SERVER: str = "localhost"
    POSTGRES_USER: str = "noticias"
    POSTGRES_PASSWORD: str = ""
    POSTGRES_DB: str = "noticias_pachuca"
    POSTGRES_PORT: int = Field(default=5432)
    DATABASE_URL: Optional[str] = Field(default=None, validate_default=True)

    FRONTEND_URL: str = Field(default="https://noticiaspachuca.com")

    EMAIL_API: SecretStr = Field(default=SecretStr(""))
    SENDER_EMAIL: str = Field(default="boletin@noticiaspachuca.com")
    SENDER_NAME: str = Field(default="Noticias Pachuca")
    ADMIN_EMAIL: str = Field(default="contacto@noticiaspachuca.com")
    MAIL_MAX_WORKERS: int = Field(default=10, ge=1)

    CONFIRMATION_TOKEN_TTL_HOURS: int = Field(default=24, ge=1)
    CATEGORY_CACHE_TTL_SECONDS: int = Field(default=300, ge=0)
    BULLETIN_TIMEZONE: str = Field(default="America/Mexico_City")
    SEARCH_LANGUAGE: str = Field(default="spanish")

    @field_validator("DATABASE_URL", mode='before')
    @classmethod
    def assemble_db_connection(cls, v: Optional[str], info: Any) -> Any:
        if isinstance(v, str) and v:
            return v
        data: Dict[str, Any] = info.data
        return str(PostgresDsn.build(
            scheme="postgresql",
            username=data.get("POSTGRES_USER"),
            password=data.get("POSTGRES_PASSWORD") or None,
            host=data.get("POSTGRES_SERVER"),
            port=int(data.get("POSTGRES_PORT", 5432)),
            path=data.get("POSTGRES_DB") or "",
        ))

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v: Union[str, List[str]]) -> Union[List[str], str]:
        if isinstance(v, str):
            try:
                import json
                return json.loads(v)
            except json.JSONDecodeError:
                return [i.strip() for i in v.split(",") if i.strip()]
        return v

    @computed_field
    @property
    def PROTOCOL(self) -> str:
        return "https" if self.ENVIRONMENT == "production" else "http"

    @classmethod
    def from_gcp_secrets(cls) -> 'Settings':
        secrets = get_secrets()
        if secrets:
            return cls(**secrets)
        return cls()


def get_settings() -> Settings:
    env = os.getenv("ENVIRONMENT", "development")
    if env == "production":
        return Settings.from_gcp_secrets()
    return Settings()


settings = get_settings()

logger.info("Settings loaded:")
for field, value in settings.model_dump().items():
    if isinstance(value, SecretStr) or field in ("POSTGRES_PASSWORD", "DATABASE_URL"):
        logger.info(f"{field}: [REDACTED]")
    else:
        logger.info(f"{field}: {value}")
