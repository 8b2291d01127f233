from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(ValueError):
    """Raised when a splitter is constructed with an unusable configuration."""


class Settings(BaseSettings):
    # Size budget
    CHUNK_SIZE: int = 1000  # significant characters per chunk
    CHUNK_OVERLAP: int = 200  # headroom left for backfilled context
    COUNT_WHITESPACE: bool = False  # count indentation and trailing blanks

    # Separator cascade
    CONTENT_TYPE: str = "generic"  # generic|markdown|source|custom
    CUSTOM_SEPARATORS: List[str] = []  # regex fragments, coarsest first

    # Observability
    SPLIT_DEBUG: bool = Field(
        default=False,
        description="Log intermediate groupings while splitting",
    )
    LOG_FORMAT: str = "auto"  # json|plain|auto

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @classmethod
    def load_config(cls, config_file: Optional[str] = None) -> "Settings":
        """Load settings; file values win over env, CLI flags are applied by callers."""
        config_data: Dict[str, Any] = {}

        config_path: Optional[Path]
        if config_file:
            config_path = Path(config_file)
        else:
            # Auto-discover .textcascade.{yaml,yml,toml}
            for ext in ["yaml", "yml", "toml"]:
                config_path = Path(f".textcascade.{ext}")
                if config_path.exists():
                    break
            else:
                config_path = None

        if config_path and config_path.exists():
            if config_path.suffix in [".yaml", ".yml"]:
                import yaml  # type: ignore[import-untyped]

                with open(config_path) as f:
                    config_data = yaml.safe_load(f) or {}
            elif config_path.suffix == ".toml":
                import tomllib

                with open(config_path, "rb") as f:
                    config_data = tomllib.load(f)

        # Keys in config files may be written in lower case
        config_data = {key.upper(): value for key, value in config_data.items()}

        # Fields missing from the file fall back to env / .env / defaults
        return cls(**config_data)


SETTINGS = Settings()
