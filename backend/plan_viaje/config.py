from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Airtable
    airtable_base_id: str = ""
    airtable_token: str = ""
    airtable_base_url: str = "https://api.airtable.com/v0"
    airtable_view: str = ""
    airtable_page_size: int = 100
    airtable_timeout_seconds: float = 9.0
    airtable_retry_delay_seconds: float = 0.45
    airtable_max_pages: int = 30

    # Logging
    log_level: str = "INFO"
    log_file: str = ""

    # CORS
    cors_origins: str = "*"

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",")]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


settings = Settings()
