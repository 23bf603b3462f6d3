from typing import List

from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    DATABASE_URL: str = "postgresql://fitorbit:fitorbit@db:5432/fitorbit"
    SQL_ECHO: bool = False
    # Drops every table on startup; keep off outside local experiments
    RESET_DATABASE: bool = False

    SECRET_KEY: str = "SECRET_KEY_FOR_FITORBIT"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7

    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",
    ]
    LOG_LEVEL: str = "INFO"

    MESSAGE_PAGE_SIZE: int = 50
    NOTIFICATION_PAGE_SIZE: int = 50

    ADMIN_NAME: str = "FitOrbit Admin"
    ADMIN_EMAIL: str = "admin@fitorbit.app"
    ADMIN_PASSWORD: str = "admin123"

    @property
    def REFRESH_SECRET_KEY(self) -> str:
        return self.SECRET_KEY + "_refresh"

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "allow"

settings = Settings()
