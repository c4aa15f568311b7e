"""Configuration loader with validation and error handling."""

import os
import yaml
import logging
from pathlib import Path
from typing import Dict, Any, Optional
from dotenv import load_dotenv
from pydantic import ValidationError

from .models import SystemConfig

logger = logging.getLogger(__name__)

TOKEN_ENV = "DISCORD_BOT_TOKEN"


class ConfigLoadError(Exception):
    """Base exception for configuration loading errors."""
    pass


class ConfigValidationError(ConfigLoadError):
    """Configuration validation failed."""
    
    def __init__(self, errors: list[dict], file_path: Path):
        self.errors = errors
        self.file_path = file_path
        super().__init__(self._format_errors())
    
    def _format_errors(self) -> str:
        """Format validation errors for user display."""
        lines = [f"Configuration validation failed for {self.file_path}:\n"]
        for error in self.errors:
            loc = " → ".join(str(l) for l in error['loc'])
            msg = error['msg']
            lines.append(f"  • {loc}: {msg}")
        return "\n".join(lines)


class ConfigLoader:
    """Loads, validates and saves the card reader configuration file."""
    
    def __init__(self, config_path: Path = Path("config.yaml")):
        self.config_path = Path(config_path)
    
    def load_yaml(self, file_path: Path) -> Dict[str, Any]:
        """Load YAML file with error handling."""
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
                if data is None:
                    return {}
                if not isinstance(data, dict):
                    raise ConfigLoadError(f"Expected a mapping at the top of {file_path}")
                return data
        except FileNotFoundError:
            raise ConfigLoadError(f"Configuration file not found: {file_path}")
        except yaml.YAMLError as e:
            raise ConfigLoadError(f"Invalid YAML in {file_path}: {e}")
    
    def load(self) -> SystemConfig:
        """
        Load configuration.
        
        Writes a default configuration file if none exists yet.
        """
        if not self.config_path.exists():
            logger.info(f"Config not found at {self.config_path}, writing defaults")
            config = SystemConfig()
            self.save(config)
            return config
        
        try:
            data = self.load_yaml(self.config_path)
            config = SystemConfig(**data)
            logger.info(f"Loaded config from {self.config_path}")
            return config
        except ValidationError as e:
            raise ConfigValidationError(e.errors(), self.config_path)
    
    def save(self, config: SystemConfig) -> Path:
        """
        Save configuration to the YAML file.
        
        Raises:
            ConfigLoadError: If save fails
        """
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, 'w', encoding='utf-8') as f:
                yaml.dump(
                    config.model_dump(mode='json'),
                    f,
                    default_flow_style=False,
                    allow_unicode=True,
                    sort_keys=False,
                    indent=2
                )
            logger.debug(f"Saved config to {self.config_path}")
            return self.config_path
        except OSError as e:
            raise ConfigLoadError(f"Failed to save config to {self.config_path}: {e}")
    
    def load_bot_token(self, env_path: Optional[Path] = None) -> str:
        """
        Read the Discord bot token from the environment.
        
        A ``.env`` file next to the config file is loaded first.
        
        Raises:
            ConfigLoadError: If no token is set
        """
        load_dotenv(env_path or self.config_path.parent / '.env')
        token = os.getenv(TOKEN_ENV)
        if not token:
            raise ConfigLoadError(
                f"{TOKEN_ENV} not found in environment.\n"
                "Add your bot token to a .env file next to the config file."
            )
        return token
