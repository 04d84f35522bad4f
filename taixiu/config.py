from pydantic_settings import BaseSettings, SettingsConfigDict
import os

# Tổng 3 viên xúc xắc: 3..18
TOTAL_MIN = 3
TOTAL_MAX = 18

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", 3000))
    api_key: str | None = os.getenv("API_KEY")
    db_dsn: str = os.getenv("DB_DSN", "sqlite:///./data/tai_xiu.db")
    source_url: str = os.getenv("SOURCE_URL", "https://wtxmd52.tele68.com/v1/txmd5/sessions")
    source_timeout: float = float(os.getenv("SOURCE_TIMEOUT", 12))
    source_retries: int = int(os.getenv("SOURCE_RETRIES", 2))
    source_backoff: float = float(os.getenv("SOURCE_BACKOFF", 0.5))
    history_capacity: int = int(os.getenv("HISTORY_CAPACITY", 20))
    total_min: int = int(os.getenv("TOTAL_MIN", TOTAL_MIN))
    total_max: int = int(os.getenv("TOTAL_MAX", TOTAL_MAX))
    report_tag: str = os.getenv("REPORT_TAG", "tai-xiu-ai")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    cors_origins: str = os.getenv("CORS_ORIGINS", "*")  # "a.com,b.com" hoặc "*"

settings = Settings()
