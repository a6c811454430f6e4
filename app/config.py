from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import List


class Settings(BaseSettings):
    # Database
    database_url: str = "sqlite:///./timesheets.db"

    # Weekly aggregation
    # Hours at which a week counts as COMPLETED
    completed_hours_threshold: float = 40.0
    # Locales tried, in order, when the requested locale has no records (comma-separated)
    # Example: en,fr
    fallback_locales: str = "en"
    # Timezone used only to work out "the current year" for the default listing range
    timezone: str = "UTC"

    # Pagination
    default_page_size: int = 10
    max_page_size: int = 100

    # Application
    app_env: str = "development"
    log_level: str = "INFO"
    log_dir: str = "logs"

    class Config:
        env_file = ".env"
        case_sensitive = False

    @property
    def fallback_locale_list(self) -> List[str]:
        return [loc.strip() for loc in self.fallback_locales.split(",") if loc.strip()]


@lru_cache()
def get_settings() -> Settings:
    return Settings()
