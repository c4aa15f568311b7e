"""Pydantic models for configuration validation."""

from typing import List, Literal
from pydantic import BaseModel, Field, field_validator, ConfigDict


DEFAULT_COMMANDS = ["读卡", "解析卡", "看卡", "card"]


class ReaderConfig(BaseModel):
    """Trigger and reply behavior of the card reading command."""

    enabled: bool = True
    commands: List[str] = Field(default_factory=lambda: list(DEFAULT_COMMANDS))
    prefixes: List[str] = Field(default_factory=list, description="Empty matches commands directly")
    text_preview: bool = Field(default=True, description="Send a short text preview with the files")

    @field_validator('commands')
    @classmethod
    def validate_commands(cls, v: List[str]) -> List[str]:
        """Strip commands and require at least one."""
        commands = [c.strip() for c in v if c and c.strip()]
        if not commands:
            raise ValueError('at least one trigger command is required')
        return commands

    @field_validator('prefixes')
    @classmethod
    def drop_blank_prefixes(cls, v: List[str]) -> List[str]:
        return [p for p in v if p and p.strip()]


class BotConfig(BaseModel):
    """Discord bot runtime settings."""

    max_image_size_mb: int = Field(default=20, gt=0, le=100)
    download_timeout_seconds: int = Field(default=30, gt=0)
    verify_crc: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    @field_validator('log_level', mode='before')
    @classmethod
    def upper_log_level(cls, v):
        return v.upper() if isinstance(v, str) else v


class SystemConfig(BaseModel):
    """Top-level configuration."""

    model_config = ConfigDict(extra='ignore')

    reader: ReaderConfig = Field(default_factory=ReaderConfig)
    bot: BotConfig = Field(default_factory=BotConfig)
