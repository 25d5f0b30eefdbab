"""Configuration management using Pydantic settings."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Pipeline settings loaded from MAPCAPTIONS_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="MAPCAPTIONS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Relative input and output paths resolve against this directory
    work_dir: Path = Path(".")

    # Output naming
    tree_suffix: str = ".tree.txt"       # replaces a trailing .json on the output path
    batch_suffix: str = ".captions.json"  # appended to the map file's base name

    # Serialization
    json_indent: int = 2
    ensure_ascii: bool = False
    write_tree: bool = True

    # Logging
    log_level: str = "WARNING"


settings = Settings()
