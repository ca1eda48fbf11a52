from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "RICH Goal Tracker API"
    # empty key disables AI moderation; every check then fails open
    gemini_api_key: str = ""
    gemini_model: str = "gemini-3-flash-preview"  # override via GEMINI_MODEL in .env if needed
    database_url: str = ""
    db_pool_min_size: int = 1
    db_pool_max_size: int = 10
    # Comma-separated origins for CORS.
    cors_allow_origins: str = "*"
    jwt_secret_key: str
    jwt_algorithm: str = "HS256"
    log_level: str = "INFO"
    log_json: bool = False
    log_file: str | None = None

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore")

    @property
    def cors_origins(self) -> list[str]:
        return [origin.strip() for origin in self.cors_allow_origins.split(",") if origin.strip()]


settings = Settings()
