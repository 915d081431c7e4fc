from pydantic import BaseModel, ConfigDict, field_validator
from dotenv import load_dotenv
import os

load_dotenv()

class Settings(BaseModel):
    model_config = ConfigDict(validate_default=True)

    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./taskboard.db")
    JWT_SECRET: str = os.getenv("JWT_SECRET", "")
    JWT_ALG: str = os.getenv("JWT_ALG", "HS256")
    REFRESH_TOKEN_SECRET: str = os.getenv("REFRESH_TOKEN_SECRET", "")
    ACCESS_TOKEN_MINUTES: int = int(os.getenv("ACCESS_TOKEN_MINUTES", "15"))
    REFRESH_TOKEN_DAYS: int = int(os.getenv("REFRESH_TOKEN_DAYS", "7"))
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    CLIENT_URL: str = os.getenv("CLIENT_URL", "http://localhost:3000")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    @field_validator("JWT_SECRET", "REFRESH_TOKEN_SECRET")
    @classmethod
    def _require_secret(cls, value: str, info) -> str:
        if not value or not value.strip():
            raise ValueError(f"{info.field_name} must be set to a non-empty value")
        return value

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.strip().lower() == "production"

settings = Settings()
