from typing import List
from pydantic_settings import BaseSettings
from pydantic import ConfigDict


class Settings(BaseSettings):
    model_config = ConfigDict(env_file=".env", extra="ignore")

    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    # Server
    SEED_CATALOGS: bool = True

    # CORS
    ALLOWED_ORIGINS: List[str] = ["http://localhost:5173"]

    # Client: remote store
    API_BASE_URL: str = "http://localhost:8000"
    REMOTE_TIMEOUT_SECONDS: float = 10.0

    # Client: local cache
    LOCAL_CACHE_PATH: str = "~/.symptrack/cache.json"
    LOCAL_CACHE_NAMESPACE: str = "symptom-tracker"
    LOCAL_CACHE_MAX_BYTES: int = 5 * 1024 * 1024


settings = Settings()
