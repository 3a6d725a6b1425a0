from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import List

class Settings(BaseSettings):
    # Application
    APP_NAME: str = "PoliMarket"
    APP_PORT: int = 5001
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    
    # Database
    DATABASE_URL: str = "sqlite:///./polimarket.db"
    SQL_ECHO: bool = False
    
    # CORS (comma separated)
    CORS_ALLOWED_ORIGINS: str = "http://localhost:4200,http://localhost:3001"
    CORS_ALLOW_CREDENTIALS: bool = True
    
    # Bootstrap
    SEED_ON_STARTUP: bool = True
    
    # Inventory
    MOVEMENT_RETRY_LIMIT: int = 1
    
    @property
    def cors_origins(self) -> List[str]:
        return [o.strip() for o in self.CORS_ALLOWED_ORIGINS.split(",") if o.strip()]
    
    class Config:
        env_file = ".env"
        extra = "ignore"

@lru_cache()
def get_settings() -> Settings:
    return Settings()

settings = get_settings()
