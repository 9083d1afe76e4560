from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "Finance Tracker API"
    # Directory holding users.json, expenses.json and goals.json.
    data_dir: str = "data"
    token_secret_key: str
    token_ttl_hours: int = 24
    # Comma-separated origins for CORS.
    cors_allow_origins: str = "*"
    # AI advice is disabled while the key is empty.
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.5-flash"
    gemini_timeout_seconds: int = 20
    gemini_max_retries: int = 2
    currency_symbol: str = "₦"
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore")


settings = Settings()
