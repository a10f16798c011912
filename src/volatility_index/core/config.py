"""Configuration models for the volatility index application.

Loads and validates configuration from YAML files using pydantic.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

MILLISECONDS_PER_DAY = 24 * 60 * 60 * 1000


class EstimatorConfig(BaseModel):
    """Rolling window configuration."""

    lookback_days: float = Field(default=30, gt=0)
    # Used until a seed message defines the bucket width
    default_bucket_ms: int = Field(default=1000, gt=0)

    @property
    def lookback_ms(self) -> int:
        """Return the lookback duration in milliseconds."""
        return int(self.lookback_days * MILLISECONDS_PER_DAY)


class FeedConfig(BaseModel):
    """Price index feed configuration."""

    url: str = "wss://www.deribit.com/ws/api/v2"
    channel: str = "deribit_price_index.btc_usd"
    index_name: str = "btc_usd"
    seed_request_id: str = "seed"
    seed_range: str = "1y"
    subscribe_request_id: int = 1


class AppConfig(BaseModel):
    """Root configuration for the volatility index application."""

    estimator: EstimatorConfig = Field(default_factory=EstimatorConfig)
    feed: FeedConfig = Field(default_factory=FeedConfig)

    # Logging
    log_level: str = "INFO"
    log_file: str | None = None

    @classmethod
    def from_yaml(cls, path: str | Path) -> AppConfig:
        """Load configuration from a YAML file.

        Args:
            path: Path to the YAML configuration file

        Returns:
            Validated AppConfig

        Raises:
            FileNotFoundError: If the config file doesn't exist
            ValidationError: If the config is invalid
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f)

        return cls.model_validate(data or {})

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AppConfig:
        """Load configuration from a dictionary.

        Args:
            data: Configuration dictionary

        Returns:
            Validated AppConfig
        """
        return cls.model_validate(data)

    def to_yaml(self, path: str | Path) -> None:
        """Save configuration to a YAML file.

        Args:
            path: Path to write the configuration
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w") as f:
            yaml.dump(self.model_dump(mode="json"), f, default_flow_style=False)


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load application configuration.

    Looks for config in the following order:
    1. Provided path argument
    2. ./config/volatility.yaml
    3. ./config/config.yaml
    4. ./volatility.yaml
    5. Default configuration

    Args:
        path: Optional explicit path to config file

    Returns:
        Validated AppConfig
    """
    if path:
        return AppConfig.from_yaml(path)

    default_paths = [
        Path("./config/volatility.yaml"),
        Path("./config/config.yaml"),
        Path("./volatility.yaml"),
    ]

    for default_path in default_paths:
        if default_path.exists():
            return AppConfig.from_yaml(default_path)

    return AppConfig()
