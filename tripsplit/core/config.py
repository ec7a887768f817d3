"""
Application configuration and environment settings.
"""
from pydantic_settings import BaseSettings
from pydantic import field_validator
from typing import List, Union


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""
    
    # Application
    APP_NAME: str = "tripsplit"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    
    # Database
    DATABASE_URL: str = "sqlite:///./tripsplit.db"
    DB_ECHO: bool = False
    
    # CORS
    CORS_ORIGINS: Union[List[str], str] = ["http://localhost:3000", "http://localhost:5173"]
    
    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS_ORIGINS from comma-separated string or list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v
    
    # Exchange Rate
    FX_API_KEY: str = ""
    FX_API_URL: str = "https://v6.exchangerate-api.com/v6"
    FX_TIMEOUT_SECONDS: float = 10.0
    DEFAULT_LEDGER_CURRENCY: str = "EUR"
    
    # Settlement
    MISSING_SHARES_POLICY: str = "all_participants"  # "all_participants" or "payer"
    
    @field_validator("MISSING_SHARES_POLICY")
    @classmethod
    def check_missing_shares_policy(cls, v):
        """Only the two documented fallbacks are accepted."""
        if v not in ("all_participants", "payer"):
            raise ValueError("MISSING_SHARES_POLICY must be 'all_participants' or 'payer'")
        return v
    
    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
