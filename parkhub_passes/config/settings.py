"""Client configuration model."""

import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from .constants import (
    API_BASE_URL,
    DEFAULT_BASE_DELAY_MS,
    DEFAULT_CHUNK_SIZE,
    DEFAULT_MAX_DELAY_MS,
    DEFAULT_MAX_RETRIES,
    DEFAULT_TIMEOUT_SECONDS,
    ENV_API_KEY,
    ENV_BASE_URL,
    ENV_BATCH_SIZE,
    ENV_LANDMARK_ID,
    ENV_MAX_RETRIES,
    ENV_TIMEOUT,
    LANDMARK_ID,
    MAX_CHUNK_SIZE,
)


class ClientConfig(BaseModel):
    """Configuration shared by the HTTP client and the batch orchestrator."""

    base_url: str = Field(default=API_BASE_URL, description="ParkHub API base URL")
    landmark_id: str = Field(default=LANDMARK_ID, description="Landmark the passes belong to")
    api_key: Optional[str] = Field(
        default=None,
        repr=False,
        description="Initial API key; rotate through AuthenticatedClient.set_api_key"
    )

    # Transport
    timeout: float = Field(
        default=DEFAULT_TIMEOUT_SECONDS,
        gt=0,
        description="Per-request timeout in seconds"
    )

    # Retry configuration
    max_retries: int = Field(default=DEFAULT_MAX_RETRIES, ge=0, le=10)
    base_delay_ms: float = Field(default=DEFAULT_BASE_DELAY_MS, ge=0)
    max_delay_ms: float = Field(default=DEFAULT_MAX_DELAY_MS, ge=0)
    retry_reads: bool = Field(
        default=True,
        description="Automatically retry GET requests on retryable errors"
    )
    retry_creates: bool = Field(
        default=False,
        description="Automatically retry pass creation (POST) on retryable errors"
    )

    # Batch creation
    chunk_size: int = Field(
        default=DEFAULT_CHUNK_SIZE,
        ge=1,
        le=MAX_CHUNK_SIZE,
        description="Maximum number of creation calls in flight at once"
    )

    # Authentication
    clear_key_on_auth_error: bool = Field(
        default=False,
        description="Forget the API key after a 401/403 response"
    )

    @field_validator("base_url")
    def strip_trailing_slash(cls, v):
        return v.rstrip("/")

    @classmethod
    def from_env(cls, **overrides) -> "ClientConfig":
        """
        Build a config from environment variables (and a .env file if present).

        Keyword overrides take precedence over the environment.
        """
        load_dotenv()

        values = {}
        env_map = {
            "api_key": ENV_API_KEY,
            "base_url": ENV_BASE_URL,
            "landmark_id": ENV_LANDMARK_ID,
            "timeout": ENV_TIMEOUT,
            "max_retries": ENV_MAX_RETRIES,
            "chunk_size": ENV_BATCH_SIZE,
        }
        for field_name, env_var in env_map.items():
            value = os.getenv(env_var)
            if value:
                values[field_name] = value

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
