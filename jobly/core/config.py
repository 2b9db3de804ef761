from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    PROJECT_NAME: str = "Jobly"

    # Database Settings
    POSTGRES_USER: str = "user"
    POSTGRES_PASSWORD: str = "password"
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_PORT: str = "5432"
    POSTGRES_DB: str = "jobly"

    # Full URL wins over the POSTGRES_* parts (e.g. sqlite for local runs)
    DATABASE_URL_OVERRIDE: Optional[str] = None

    @property
    def DATABASE_URL(self) -> str:
        if self.DATABASE_URL_OVERRIDE:
            return self.DATABASE_URL_OVERRIDE
        return f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    # Password hashing
    BCRYPT_WORK_FACTOR: int = 12

    # Logging
    LOG_LEVEL: str = "INFO"
    JSON_LOGS: bool = True

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
