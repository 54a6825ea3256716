"""Configuration management for the divination service"""

import os
from typing import Optional, List
from pathlib import Path
import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


class ModelSpecificConfig(BaseModel):
    """Model-specific configuration"""
    api_key_env: Optional[str] = None
    base_url: Optional[str] = None
    model: Optional[str] = None
    max_tokens: int = 2048
    temperature: float = 0.7


class ModelConfig(BaseModel):
    """Model configuration"""
    primary: str = "gpt-4o-mini"
    fallback: str = "claude-sonnet-4-5"
    openai: ModelSpecificConfig = Field(
        default_factory=lambda: ModelSpecificConfig(
            api_key_env="OPENAI_API_KEY",
            model="gpt-4o-mini",
        )
    )
    claude: ModelSpecificConfig = Field(
        default_factory=lambda: ModelSpecificConfig(
            api_key_env="ANTHROPIC_API_KEY",
            model="claude-sonnet-4-5",
        )
    )
    deepseek: ModelSpecificConfig = Field(
        default_factory=lambda: ModelSpecificConfig(
            api_key_env="DEEPSEEK_API_KEY",
            base_url="https://api.deepseek.com",
            model="deepseek-chat",
        )
    )


class OrchestratorConfig(BaseModel):
    """Agent pipeline configuration"""
    max_review_iterations: int = Field(default=3, ge=0)


class ServerConfig(BaseModel):
    """HTTP server configuration"""
    request_timeout_seconds: float = Field(default=60.0, gt=0)
    cors_origins: List[str] = Field(
        default_factory=lambda: [
            "http://localhost:3000",  # React dev server
            "http://localhost:5173",  # Vite dev server
        ]
    )


class Config(BaseModel):
    """Main configuration"""
    model: ModelConfig = Field(default_factory=ModelConfig)
    orchestrator: OrchestratorConfig = Field(default_factory=OrchestratorConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)

    @classmethod
    def from_yaml(cls, config_path: str = "config.yaml") -> "Config":
        """Load configuration from YAML file"""
        config_file = Path(config_path)
        if not config_file.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_file, 'r') as f:
            config_data = yaml.safe_load(f) or {}

        return cls(**config_data)

    def get_api_key(self, model_type: str) -> Optional[str]:
        """Get API key for specific model type"""
        model_config = getattr(self.model, model_type, None)
        if model_config and model_config.api_key_env:
            return os.getenv(model_config.api_key_env)
        return None


class AppSettings(BaseSettings):
    """Process-level settings read from the environment (DIVINATION_*)"""
    model_config = SettingsConfigDict(env_prefix="DIVINATION_", extra="ignore")

    config_path: str = "config.yaml"
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000


# Global config instance
_config: Optional[Config] = None


def get_config(config_path: Optional[str] = None) -> Config:
    """Get or create global configuration instance"""
    global _config
    if _config is None:
        _config = Config.from_yaml(config_path or AppSettings().config_path)
    return _config


def reload_config(config_path: Optional[str] = None) -> Config:
    """Reload configuration from file"""
    global _config
    _config = Config.from_yaml(config_path or AppSettings().config_path)
    return _config
