"""
Configuration management for mimbook

Provides pydantic-based configuration with environment variable support
and YAML file loading capabilities.
"""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class OutputConfig(BaseModel):
    """Where and how generated runbooks are written"""

    directory: str = "output"
    # Formatted with number= and timestamp=
    filename_pattern: str = "RB-{number}-{timestamp}"
    timestamp_format: str = "%Y-%m-%dT%H-%M-%S"


class TemplatesConfig(BaseModel):
    """Email template location"""

    # None means the templates shipped inside the package
    templates_dir: Optional[str] = None


class TelemetryConfig(BaseModel):
    """Tracing configuration"""

    enable_tracing: bool = True
    service_name: str = "mimbook"


class MimbookConfig(BaseSettings):
    """Main mimbook configuration"""

    model_config = SettingsConfigDict(
        env_prefix="MIMBOOK_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    output: OutputConfig = Field(default_factory=OutputConfig)
    templates: TemplatesConfig = Field(default_factory=TemplatesConfig)
    telemetry: TelemetryConfig = Field(default_factory=TelemetryConfig)

    log_level: str = "INFO"

    @classmethod
    def load_from_file(cls, config_path: str = "mimbook.yml") -> "MimbookConfig":
        """
        Load configuration from a YAML file

        Values in the file are passed as init arguments, so they take precedence
        over MIMBOOK_* environment variables; the environment only fills in
        settings the file leaves out.
        """
        import yaml

        config_file = Path(config_path)
        config_data = {}

        if config_file.exists():
            with open(config_file, encoding="utf-8") as f:
                config_data = yaml.safe_load(f) or {}

        return cls(**config_data)

    def get_templates_dir(self) -> Path:
        """Directory holding the email templates"""
        if self.templates.templates_dir:
            return Path(self.templates.templates_dir)
        return Path(__file__).parent / "templates"


# Global configuration instance
_config: Optional[MimbookConfig] = None


def get_config() -> MimbookConfig:
    """Get the global configuration instance"""
    global _config
    if _config is None:
        _config = MimbookConfig.load_from_file()
    return _config


def set_config(config: MimbookConfig) -> None:
    """Set the global configuration instance"""
    global _config
    _config = config
