from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    # Credentials come from the environment or .env
    DATABASE_URL: str = "postgresql+asyncpg://localhost:5432/lightbnb"
    DB_POOL_SIZE: int = 5
    DB_POOL_TIMEOUT: float = 10.0
    # asyncpg connect and per-statement timeouts, in seconds
    DB_CONNECT_TIMEOUT: float = 5.0
    DB_COMMAND_TIMEOUT: float = 15.0
    REDIS_URL: str = "redis://localhost:6379/0"
    # Search result cache lifetime; 0 disables the cache
    SEARCH_CACHE_TTL: int = 0
    RATE_LIMIT_ENABLED: bool = False
    DEFAULT_RESULT_LIMIT: int = 10
    MAX_RESULT_LIMIT: int = 50
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True
    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

settings = Settings()
