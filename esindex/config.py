"""
Runtime configuration.

Values come from the process environment, then from a .env file in the
working directory, then from the defaults below.
"""

import logging
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from esindex.index.models import ControllerConfig, MappingLocation

load_dotenv(".env")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(case_sensitive=False, extra="ignore")

    elasticsearch_endpoint: str = "http://localhost:9200"
    elasticsearch_index: str = Field(default="index", description="Prefix of every index version name")

    s3_endpoint: Optional[str] = None
    s3_bucket_name: str = ""
    s3_object_key: str = ""

    max_health_retries: int = 10
    health_wait_timeout: str = "60s"
    request_timeout_ms: int = 120 * 1000

    log_level: str = "INFO"

    def controller_config(self) -> ControllerConfig:
        return ControllerConfig(
            mapping_location=MappingLocation(bucket=self.s3_bucket_name, key=self.s3_object_key),
            index_name_prefix=self.elasticsearch_index,
            max_health_retries=self.max_health_retries,
            request_timeout_ms=self.request_timeout_ms,
        )


settings = Settings()


def setup_logging(level: Optional[str] = None):
    level = (level or settings.log_level).upper()
    logging.basicConfig(level=level, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    # basicConfig is a no-op when the runtime already installed a handler
    logging.getLogger().setLevel(level)
