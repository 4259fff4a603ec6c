from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # Server
    host: str = "0.0.0.0"
    port: int = 9002
    log_level: str = "WARNING"

    # Marketplace API
    marketplace_base_url: str = "https://flex-api.sharetribe.com"
    marketplace_client_id: str = ""
    marketplace_timeout: float = 10.0

    # Featured feed
    feed_refresh_interval: float = 30.0
    listing_fields: list[str] = []

    # Landing page sections
    sections_path: str = "./data/sections.yaml"
