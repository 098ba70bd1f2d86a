from pathlib import Path
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="DASHBOARD_", env_file=".env", extra="ignore", populate_by_name=True)

    data_url: Optional[str] = None
    data_dir: Path = Path("data")
    years: list[str] = ["2022", "2023", "2024", "2025"]

    geocode_cache_path: Optional[Path] = Path(".cache/geocode.duckdb")
    geocode_cache_key: str = "geocodeCache"

    google_maps_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("DASHBOARD_GOOGLE_MAPS_API_KEY", "GOOGLE_MAPS_API_KEY"),
    )
    geocode_requests_per_second: float = 10.0
    request_timeout: float = 10.0
    max_retries: int = 3

    max_workers: Optional[int] = None
    show_progress: bool = False


settings = Settings()
