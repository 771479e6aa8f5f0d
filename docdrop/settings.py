import logging

from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="DOCDROP_", extra="ignore")

    storage_backend: str = "local"
    storage_local_path: str = "./uploads"

    s3_bucket: str = ""
    s3_region: str = ""
    s3_access_key_id: str = ""
    s3_secret_access_key: str = ""
    s3_endpoint_url: str = ""
    s3_presigned_expiry: int = 600  # 10 minutes in seconds
    s3_check_exists: bool = False

    public_url: str = ""
    trust_proxy_headers: bool = False

    host: str = "0.0.0.0"
    port: int = 5000

    upload_field: str = "pdf"
    cors_origins: str = "http://localhost:5173"

    log_level: str = "INFO"
    log_json: bool = False

    def get_cors_origins(self) -> list[str]:
        origins = [o.strip() for o in self.cors_origins.split(",") if o.strip()]
        if "*" in origins:
            logger.warning("DOCDROP_CORS_ORIGINS allows any origin")
        return origins


settings = Settings()
