"""Configuration management."""

import os
from pathlib import Path
from typing import Literal

from dotenv import dotenv_values
from pydantic import Field
from pydantic_settings import BaseSettings

BASE_DIR = Path(__file__).resolve().parent.parent


def load_env_file(env_file: Path = BASE_DIR / ".env") -> None:
    """Copy values from a local .env into the environment.

    Variables already present in the environment win over the file.
    """
    if not env_file.exists():
        return
    file_env = dotenv_values(env_file)
    for key, value in file_env.items():
        if key not in os.environ and value is not None:
            os.environ[key] = value


load_env_file()


class Settings(BaseSettings):
    """Diagram and logging settings pulled from EFGY_* environment variables."""

    # Diagram
    bounding_box_size: float = Field(
        default=1000.0, gt=0, description="Half-width of the bounding square"
    )
    centre_on_first_site: bool = Field(
        default=False, description="Centre the bounding square on the first site"
    )
    duplicate_policy: Literal["ignore", "raise"] = Field(
        default="ignore", description="What to do with an already inserted site"
    )
    perimeter_sweep: bool = Field(
        default=True, description="Re-check cells the neighbour cascade cannot reach"
    )

    # Geometry kernel
    kernel: Literal["float", "exact"] = Field(
        default="float", description="Geometry kernel (float or exact rational)"
    )
    tolerance: float = Field(
        default=1e-7, gt=0, description="Distance under which a point is on a line"
    )
    bisector_extent_factor: float = Field(
        default=4.0, ge=3.0, description="Bisector half-length in bounding sizes"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: Literal["json", "plain"] = Field(
        default="json", description="Logging format (json or plain)"
    )

    class Config:
        env_prefix = "EFGY_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


settings = Settings()


def get_settings() -> Settings:
    """Return the process-wide settings object."""
    return settings
