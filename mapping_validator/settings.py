from typing import Annotated

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class MappingValidatorSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="MAPPING_VALIDATOR_",
        env_file=".env",
        extra="ignore",
    )

    host: str = "0.0.0.0"
    port: int = 5001
    reload: bool = False
    log_level: str = "INFO"
    cors_origins: list[str] = ["*"]
    # Upper bound on the document text accepted by the HTTP API, in bytes.
    max_document_size: Annotated[int, Field(gt=0)] = 5 * 1024 * 1024


mapping_validator_settings = MappingValidatorSettings()
