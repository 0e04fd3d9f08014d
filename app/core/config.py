from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import computed_field

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # App
    app_name: str = "Products API"
    debug: bool = False
    log_level: str = "INFO"

    # Cache (Redis). Absent or false CACHE_ENABLED turns the cache path off entirely.
    cache_enabled: bool = False
    cache_host: str = "localhost"
    cache_port: int = 6379
    cache_db: int = 0
    cache_ttl_seconds: int = 60
    cache_connect_timeout_seconds: float = 2.0
    cache_op_timeout_seconds: float = 1.0

    # Products
    products_cache_key: str = "products:all"
    source_delay_seconds: float = 1.5

    @computed_field
    @property
    def cache_url(self) -> str:
        return f"redis://{self.cache_host}:{self.cache_port}/{self.cache_db}"

settings = Settings()
