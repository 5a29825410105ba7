"""Configuration management."""

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Lock settings from environment."""
    
    # Logging
    log_level: str = "INFO"
    
    # Lock files
    file_mode: int = 0o644  # masked by the process umask
    
    @field_validator("file_mode", mode="before")
    @classmethod
    def parse_octal_mode(cls, value):
        """Read permission bits given as text in octal, e.g. "600" or "0o600"."""
        if isinstance(value, str):
            try:
                return int(value.strip(), 8)
            except ValueError as exc:
                raise ValueError(f"file_mode must be octal, got {value!r}") from exc
        return value
    
    class Config:
        env_prefix = "PROCLOCK_"
        env_file = ".env"
        env_file_encoding = "utf-8"
