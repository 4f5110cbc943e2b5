"""Application configuration."""
import os
from dataclasses import dataclass
from typing import Optional

TRUE_VALUES = ("1", "true", "yes", "on")


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in TRUE_VALUES


@dataclass
class RenderConfig:
    """Output settings for rendered payloads."""

    format: str = "json"
    pretty: bool = False
    indent: int = 4
    action: str = "insert"
    schema_file: Optional[str] = None  # JSON file with extra/overriding type definitions

    @classmethod
    def from_env(cls) -> "RenderConfig":
        """Load config from environment variables."""
        indent = os.getenv("UPDATE_CONNECTOR_INDENT", "")
        return cls(
            format=os.getenv("UPDATE_CONNECTOR_FORMAT", "json").lower(),
            pretty=_env_flag("UPDATE_CONNECTOR_PRETTY"),
            indent=int(indent) if indent.isdigit() and int(indent) > 0 else 4,
            action=os.getenv("UPDATE_CONNECTOR_ACTION", "insert"),
            schema_file=os.getenv("UPDATE_CONNECTOR_SCHEMA_FILE") or None,
        )

    def format_options(self) -> dict:
        return {"pretty": self.pretty, "indent": self.indent}


@dataclass
class AppConfig:
    """Application configuration."""

    log_level: str = "WARNING"
    render: RenderConfig = None

    def __post_init__(self):
        if self.render is None:
            self.render = RenderConfig.from_env()

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Load config from environment variables."""
        return cls(
            log_level=os.getenv("UPDATE_CONNECTOR_LOG_LEVEL", "WARNING").upper(),
            render=RenderConfig.from_env(),
        )


# Global instance
app_config = AppConfig.from_env()
