from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import PostgresDsn, field_validator
from typing import Optional, Any, List


class Settings(BaseSettings):
    # --- Project Settings ---
    PROJECT_NAME: str = "CGSG"
    API_V1_STR: str = "/api"
    API_PORT: str = "8000"
    BASE_DIR: Path = Path(__file__).resolve().parent.parent
    SITE_URL: str = "http://localhost:3000"

    # --- Security Settings ---
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30
    REFRESH_TOKEN_SECRET_KEY: str
    REFRESH_TOKEN_ALGORITHM: str = "HS256"
    REFRESH_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7

    # --- Database Settings ---
    POSTGRES_USER: str = "cgsg"
    POSTGRES_PASSWORD: str = ""
    POSTGRES_DB: str = "cgsg"
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: str = "5432"
    DATABASE_URL: Optional[str] = None

    @field_validator("DATABASE_URL", mode="before")
    @classmethod
    def assemble_db_connection(cls, v: Optional[str], info) -> Any:
        if isinstance(v, str):
            return v

        return str(PostgresDsn.build(
            scheme="postgresql",
            username=info.data.get("POSTGRES_USER"),
            password=info.data.get("POSTGRES_PASSWORD"),
            host=info.data.get("POSTGRES_HOST"),
            port=int(info.data.get("POSTGRES_PORT", 5432)),
            path=info.data.get("POSTGRES_DB") or "",
        ))

    # --- Maintenance Settings ---
    MAINTENANCE_REQUEST_TIMEOUT_SECONDS: float = 5.0
    MAINTENANCE_POLL_INTERVAL_SECONDS: float = 120.0
    REALTIME_PING_SECONDS: int = 15
    REALTIME_RECONNECT_SECONDS: float = 5.0

    # --- MinIO Storage Settings ---
    MINIO_ENDPOINT: str = "localhost:9000"
    MINIO_PUBLIC_URL: str = ""
    MINIO_ACCESS_KEY: str = ""
    MINIO_SECRET_KEY: str = ""
    MINIO_USE_HTTPS: bool = False
    MINIO_BUCKET_NAME: str = "cgsg-media"

    @property
    def minio_public_base(self) -> str:
        if self.MINIO_PUBLIC_URL:
            return self.MINIO_PUBLIC_URL.rstrip("/")
        scheme = "https" if self.MINIO_USE_HTTPS else "http"
        return f"{scheme}://{self.MINIO_ENDPOINT}"

    # --- Media Settings ---
    MEDIA_MAX_UPLOAD_BYTES: int = 5 * 1024 * 1024
    MEDIA_ORPHAN_GRACE_DAYS: int = 7
    MEDIA_ALLOWED_CONTENT_TYPES: List[str] = [
        "image/jpeg",
        "image/png",
        "image/webp",
        "image/gif",
        "image/svg+xml",
    ]

    # --- CORS Settings ---
    BACKEND_CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
    ]
    ALLOWED_HOSTS: List[str] = [
        "localhost",
        "localhost:8000",
        "testserver",
    ]

    model_config = SettingsConfigDict(case_sensitive=True, env_file=".env")


settings = Settings()
