"""
Configuration Management for CommentLens
Standalone configuration system with environment variable overrides
"""

import logging
import threading
from pathlib import Path
from typing import Dict, Any, Optional, Literal, List
from functools import lru_cache

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


# ============================================================================
# Core Configuration Classes
# ============================================================================


class APIConfig(BaseSettings):
    """API Server Configuration"""

    model_config = SettingsConfigDict(env_prefix="API_")

    host: str = Field(default="0.0.0.0", description="API host")
    port: int = Field(default=8000, description="API port")
    prefix: str = Field(default="/api/v1", description="API prefix")
    debug: bool = Field(default=False, description="Debug mode")
    cors_origins: str = Field(
        default="http://localhost:4200,http://localhost:8000",
        description="CORS allowed origins (comma-separated)",
    )
    report_route: str = Field(
        default="/api/v1/reports/{report_id}",
        description="Report detail route a finished analysis redirects to",
    )
    dashboard_route: str = Field(
        default="/api/v1/reports", description="Route a cancelled analysis returns to"
    )

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins into list"""
        return [origin.strip() for origin in self.cors_origins.split(",")]


class DatabaseConfig(BaseSettings):
    """Document store configuration"""

    model_config = SettingsConfigDict(env_prefix="DB_")

    url: str = Field(
        default="sqlite+aiosqlite:///./commentlens.db", description="Database URL"
    )
    echo: bool = Field(default=False, description="Echo SQL queries")


class LoggingConfig(BaseSettings):
    """Logging Configuration"""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format",
    )
    file_path: Optional[str] = Field(
        default="./logs/commentlens.log", description="Log file path"
    )


class YouTubeAPISettings(BaseSettings):
    """YouTube Data API settings"""

    model_config = SettingsConfigDict(env_prefix="YOUTUBE_")

    api_key: str = Field(default="", description="YouTube Data API v3 key")
    base_url: str = Field(
        default="https://www.googleapis.com/youtube/v3",
        description="YouTube Data API base URL",
    )
    comments_page_size: int = Field(
        default=100, description="commentThreads page size (API maximum is 100)"
    )
    comment_order: Literal["time", "relevance"] = Field(
        default="relevance", description="Comment ordering"
    )
    text_format: Literal["plainText", "html"] = Field(
        default="plainText", description="Comment text format"
    )
    request_timeout: Optional[float] = Field(
        default=None, description="Request timeout in seconds (None waits forever)"
    )

    @field_validator("comments_page_size")
    @classmethod
    def validate_page_size(cls, v: int) -> int:
        """commentThreads accepts 1..100"""
        if not 1 <= v <= 100:
            raise ValueError("comments_page_size must be between 1 and 100")
        return v


class GeminiSettings(BaseSettings):
    """Generative language API settings"""

    model_config = SettingsConfigDict(env_prefix="GEMINI_")

    api_key: str = Field(default="", description="Generative language API key")
    base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        description="Generative language API base URL",
    )
    model: str = Field(default="gemini-2.5-flash", description="Model name")
    request_timeout: Optional[float] = Field(
        default=None, description="Request timeout in seconds (None waits forever)"
    )


class AnalysisSettings(BaseSettings):
    """Analysis pipeline configuration"""

    model_config = SettingsConfigDict(env_prefix="ANALYSIS_")

    max_comments: int = Field(
        default=200, description="Top-level comments fetched per analysis"
    )
    navigation_delay_seconds: float = Field(
        default=1.5, description="Delay before redirecting to a finished report"
    )
    embed_comments: bool = Field(
        default=True, description="Store the analysed comments inside the report"
    )
    run_retention: int = Field(
        default=500, description="Runs kept in memory for status polling"
    )


class AccountSettings(BaseSettings):
    """Account and credit configuration"""

    model_config = SettingsConfigDict(env_prefix="ACCOUNT_")

    starting_credits: int = Field(
        default=2, description="Credits granted when a profile is created"
    )

    @field_validator("starting_credits")
    @classmethod
    def validate_starting_credits(cls, v: int) -> int:
        if v < 0:
            raise ValueError("starting_credits cannot be negative")
        return v


# ============================================================================
# Main Configuration Class
# ============================================================================


class Config:
    """
    Main Application Configuration
    Aggregates all configuration modules with unified access
    """

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize application configuration

        Args:
            config_path: Optional YAML config file path
        """
        self.config_path = config_path or "configs/app.yaml"
        self.yaml_config = self._load_yaml_config()

        self.api = APIConfig()
        self.database = DatabaseConfig()
        self.logging = LoggingConfig()
        self.youtube_api = YouTubeAPISettings()
        self.gemini = GeminiSettings()
        self.analysis = AnalysisSettings()
        self.accounts = AccountSettings()

    def _load_yaml_config(self) -> Dict[str, Any]:
        """Load YAML configuration file"""
        config_file = Path(self.config_path)

        if not config_file.exists():
            logger.warning(f"Config file not found: {config_file}, using defaults")
            return {}

        try:
            with open(config_file, "r", encoding="utf-8") as f:
                return yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to load config: {e}")
            return {}

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by dot notation key"""
        keys = key.split(".")
        value = self.yaml_config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    @property
    def youtube_api_key(self) -> str:
        return self.youtube_api.api_key or self.get("youtube.api_key", "")

    @property
    def gemini_api_key(self) -> str:
        return self.gemini.api_key or self.get("gemini.api_key", "")

    def to_dict(self) -> Dict[str, Any]:
        """Export full configuration as dictionary"""
        return {
            "api": self.api.model_dump(),
            "database": self.database.model_dump(),
            "logging": self.logging.model_dump(),
            "youtube_api": self.youtube_api.model_dump(exclude={"api_key"}),
            "gemini": self.gemini.model_dump(exclude={"api_key"}),
            "analysis": self.analysis.model_dump(),
            "accounts": self.accounts.model_dump(),
        }

    def get_summary(self) -> Dict[str, Any]:
        """Get configuration summary"""
        return {
            "app": self.yaml_config.get("app", {}),
            "api": {
                "host": self.api.host,
                "port": self.api.port,
                "prefix": self.api.prefix,
                "debug": self.api.debug,
            },
            "database": {
                "url": self.database.url,
            },
            "youtube_api": {
                "api_key_set": bool(self.youtube_api_key),
                "comment_order": self.youtube_api.comment_order,
            },
            "gemini": {
                "api_key_set": bool(self.gemini_api_key),
                "model": self.gemini.model,
            },
            "analysis": {
                "max_comments": self.analysis.max_comments,
                "navigation_delay_seconds": self.analysis.navigation_delay_seconds,
                "run_retention": self.analysis.run_retention,
            },
            "accounts": {
                "starting_credits": self.accounts.starting_credits,
            },
        }


# ============================================================================
# Global Configuration Instance (Singleton)
# ============================================================================

_config: Optional[Config] = None
_config_lock = threading.Lock()


@lru_cache()
def get_config(config_path: Optional[str] = None) -> Config:
    """
    Get or create global configuration instance (Thread-safe singleton)

    Args:
        config_path: Optional path to config file

    Returns:
        Config instance
    """
    global _config

    if _config is None:
        with _config_lock:
            if _config is None:
                _config = Config(config_path)
                logger.info("✅ Configuration initialized")

    return _config


def reload_config(config_path: Optional[str] = None) -> Config:
    """Force reload configuration"""
    global _config

    with _config_lock:
        get_config.cache_clear()
        _config = Config(config_path)
        logger.info("🔄 Configuration reloaded")

    return _config


def reset_config() -> None:
    """Reset global configuration (mainly for testing)"""
    global _config

    with _config_lock:
        get_config.cache_clear()
        _config = None
        logger.info("🗑️ Configuration reset")


# ============================================================================
# Configuration Validation
# ============================================================================


def validate_config(config: Optional[Config] = None) -> Dict[str, Any]:
    """
    Validate configuration

    Args:
        config: Config instance (uses global if None)

    Returns:
        Validation result with errors and warnings
    """
    if config is None:
        config = get_config()

    errors = []
    warnings = []

    if config.logging.file_path:
        log_path = Path(config.logging.file_path)
        if not log_path.parent.exists():
            try:
                log_path.parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                errors.append(f"Cannot create log directory: {e}")

    if not config.youtube_api_key:
        warnings.append("YouTube API key not set - video lookups will fail")

    if not config.gemini_api_key:
        warnings.append("Gemini API key not set - report generation will fail")

    if not config.database.url:
        errors.append("Database URL not configured")

    if config.analysis.max_comments < 1:
        errors.append("analysis.max_comments must be at least 1")
    if config.analysis.run_retention < 1:
        errors.append("analysis.run_retention must be at least 1")

    return {
        "valid": len(errors) == 0,
        "errors": errors,
        "warnings": warnings,
    }


# ============================================================================
# Logging
# ============================================================================


def setup_logging(config: Optional[Config] = None) -> None:
    """
    Setup logging based on configuration

    Args:
        config: Config instance (uses global if None)
    """
    import logging.handlers

    if config is None:
        config = get_config()

    log_level = getattr(logging, config.logging.level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter(config.logging.format))
    root_logger.addHandler(console_handler)

    if config.logging.file_path:
        log_path = Path(config.logging.file_path)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            filename=log_path,
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5,
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(logging.Formatter(config.logging.format))
        root_logger.addHandler(file_handler)

    logger.info(f"📝 Logging configured: level={config.logging.level}")


if __name__ == "__main__":
    import json

    print("🔧 Testing Configuration System...")
    print("=" * 60)

    config = get_config()
    print("\n📋 Configuration Summary:")
    print(json.dumps(config.get_summary(), indent=2))

    validation_result = validate_config(config)
    for error in validation_result["errors"]:
        print(f"  ❌ {error}")
    for warning in validation_result["warnings"]:
        print(f"  ⚠️  {warning}")

    if validation_result["valid"]:
        print("\n✅ Configuration is valid!")
