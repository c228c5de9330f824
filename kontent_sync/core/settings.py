"""
Configuration settings for the Kontent.ai synchronization service
"""

from enum import Enum
from typing import List
from pydantic_settings import BaseSettings
from pydantic import Field
from functools import lru_cache


KONTENT_MANAGEMENT_BASE_URL = "https://manage.kontent.ai/v2/projects"


class Environment(str, Enum):
    """Target Kontent.ai environment of a run"""
    DEV = "dev"
    PROD = "prod"


class KontentSettings(BaseSettings):
    """Kontent.ai Management API configuration settings"""

    # Development project
    kontent_dev_project_id: str = Field(default="")
    kontent_dev_management_api_key: str = Field(default="")
    kontent_dev_base_url: str = Field(default=KONTENT_MANAGEMENT_BASE_URL)

    # Production project
    kontent_prod_project_id: str = Field(default="")
    kontent_prod_management_api_key: str = Field(default="")
    kontent_prod_base_url: str = Field(default=KONTENT_MANAGEMENT_BASE_URL)

    # Used when the upload form does not name a content type
    content_type_codename: str = Field(default="")

    # HTTP
    kontent_request_timeout: float = Field(default=30.0)  # seconds

    # App
    log_level: str = Field(default="INFO")
    cors_origins: List[str] = Field(default=["http://localhost:3000", "http://localhost:8000"])

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"  # Ignore extra environment variables

    def project_id_for(self, environment: Environment) -> str:
        if environment == Environment.PROD:
            return self.kontent_prod_project_id
        return self.kontent_dev_project_id

    def api_key_for(self, environment: Environment) -> str:
        if environment == Environment.PROD:
            return self.kontent_prod_management_api_key
        return self.kontent_dev_management_api_key

    def base_url_for(self, environment: Environment) -> str:
        if environment == Environment.PROD:
            return self.kontent_prod_base_url
        return self.kontent_dev_base_url


@lru_cache()
def get_kontent_settings() -> KontentSettings:
    """Get cached Kontent settings instance"""
    return KontentSettings()
