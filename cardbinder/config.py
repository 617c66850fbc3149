from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="CARDBINDER_")

    app_name: str = "cardbinder"
    debug: bool = False

    # Catalog store (server side)
    database_url: str = "sqlite+aiosqlite:///./cardbinder.db"
    api_prefix: str = "/api/v1"

    # Catalog client (view model side)
    api_base_url: str = "http://localhost:8000/api/v1"
    request_timeout: float = 10.0

    # Series page scraping
    wiki_base_url: str = "https://yugioh.fandom.com/wiki"
    user_agent: str = "cardbinder/0.3"


settings = Settings()


# =============================================================================
# CATALOG DEFAULTS
# =============================================================================

# Default row template for `cardbinder list cards`
DEFAULT_CARD_FORMATTER = "|{series}|{number}|{name}|"
