from pydantic_settings import BaseSettings
from typing import List, Optional

class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./dev.db"
    DB_SSL_REQUIRE: bool = True
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 5
    DB_POOL_TIMEOUT_SECONDS: int = 10
    DB_STATEMENT_TIMEOUT_MS: int = 5000
    RESET_DB: bool = False

    APP_HOST: str = "0.0.0.0"
    APP_PORT: int = 5000
    FRONTEND_ORIGINS: List[str] = ["*"]
    LOG_LEVEL: str = "INFO"

    # payment processor
    PAYMENT_BACKEND: str = "stripe"  # "stripe" or "mock"
    STRIPE_SECRET_KEY: Optional[str] = None
    PAYMENT_TIMEOUT_SECONDS: int = 15
    CHECKOUT_CURRENCY: str = "myr"
    CHECKOUT_SUCCESS_URL: str = "https://iron-fuel-frontend-e7xl.vercel.app/success"
    CHECKOUT_CANCEL_URL: str = "https://iron-fuel-frontend-e7xl.vercel.app/cart"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

settings = Settings()
