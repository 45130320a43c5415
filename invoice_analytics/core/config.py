from typing import List, Optional

from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    DATABASE_URL: Optional[str] = None
    DB_HOST: str = "localhost"
    DB_PORT: str = "5432"
    DB_NAME: str = "invoice_analytics"
    DB_USER: str = "postgres"
    DB_PASSWORD: str = ""

    # Binds every request to one tenant (local development)
    DEFAULT_TENANT_ID: Optional[str] = None

    CORS_ORIGINS: List[str] = ["*"]
    LOG_LEVEL: str = "INFO"

    # LLM Configuration
    LLM_API_KEY: Optional[str] = None
    LLM_BASE_URL: str = "https://api.openai.com/v1"
    LLM_MODEL: str = "gpt-4o-mini"
    # LLM_MODEL: str = "llama-3.3-70b-versatile"

    # API client
    API_BASE_URL: str = "http://localhost:8000/api/v1"
    API_MAX_RETRIES: int = 3
    API_RETRY_BASE_MS: int = 1000
    API_RETRY_CEILING_MS: int = 30000
    API_TIMEOUT_SECONDS: float = 30.0

    DASHBOARD_DEFAULT_DAYS: int = 30
    TOP_ENTITIES_LIMIT: int = 5
    EXPORT_MAX_ROWS: int = 50000

    # Invoice import
    IMPORT_ALLOWED_EXTENSIONS: List[str] = [".csv", ".xlsx"]
    IMPORT_MAX_FILE_SIZE: int = 10 * 1024 * 1024  # 10MB

    # Per-tenant secrets, one file each
    SECRETS_DIR: str = ".containers/secrets"

    class Config:
        env_file = ".env"

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql+psycopg2://{self.DB_USER}:{self.DB_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        )

settings = Settings()
