from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Page fetch
    fetch_timeout_seconds: float = 15.0
    fetch_user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
    )

    # USDA FoodData Central
    fdc_api_key: Optional[str] = "DEMO_KEY"
    fdc_base_url: str = "https://api.nal.usda.gov/fdc/v1"
    fdc_page_size: int = 3
    fdc_timeout_seconds: float = 8.0

    # AI fallback extraction
    ai_mode: str = "mock"  # "mock" or "gemini"
    gemini_api_key: Optional[str] = None
    gemini_text_model: str = "gemini-2.5-flash"
    ai_text_budget: int = 12000

    # Rate limiting (per client IP)
    parse_rate_limit: str = "60/minute"

    # CORS
    cors_origins: list[str] = ["*"]


settings = Settings()
