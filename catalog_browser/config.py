"""
Configuration settings for the application.
"""

import logging
import os

from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Application settings loaded from environment variables."""

    # Environment
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")

    # Remote product-data service
    CATALOG_API_BASE_URL: str = os.getenv(
        "CATALOG_API_BASE_URL",
        "https://dummyjson.com",
    )
    CATALOG_HTTP_TIMEOUT_SECONDS: float = float(
        os.getenv("CATALOG_HTTP_TIMEOUT_SECONDS", "10")
    )

    # Catalog page behaviour
    CATALOG_PAGE_SIZE: int = int(os.getenv("CATALOG_PAGE_SIZE", "8"))
    SEARCH_DEBOUNCE_MS: int = int(os.getenv("SEARCH_DEBOUNCE_MS", "300"))
    DEFAULT_SORT_OPTION: str = os.getenv("DEFAULT_SORT_OPTION", "price-asc")

    @property
    def is_production(self) -> bool:
        """
        Check if running in production environment.
        """
        return self.ENVIRONMENT.lower() == "production"

    def __init__(self):
        self.env = os.getenv("ENV", "dev")
        self.debug = os.getenv("DEBUG", "false").lower() == "true"
        self.log_level = os.getenv("LOG_LEVEL", "INFO")
        logging.basicConfig(level=self.log_level)
        self.logger = logging.getLogger(__name__)

        self.logger.debug(
            f"Config initialized with env={self.env}, debug={self.debug}, "
            f"log_level={self.log_level}, catalog_api={self.CATALOG_API_BASE_URL}"
        )


# Create a global settings instance for import
settings = Settings()
