#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Configuration management for Cardflow using Pydantic Settings.
"""

import threading
from pathlib import Path
from typing import Literal, Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CardflowConfig(BaseSettings):
    """
    Main configuration class for Cardflow.

    Loads settings from environment variables and .env file.
    All settings can be overridden with CARDFLOW_ prefix.

    Example:
        export CARDFLOW_DATA_DIR=/path/to/data
        export CARDFLOW_HISTORY_CAPACITY=100
    """

    # Paths
    data_dir: Path = Field(
        default=Path("./data"),
        description="Base directory for saved workflows"
    )
    log_dir: Path = Field(
        default=Path("./logs"),
        description="Directory for log files"
    )
    workflows_file: str = Field(
        default="workflows.json",
        description="File name (inside data_dir) holding saved workflows"
    )

    # Editor Settings
    history_capacity: int = Field(
        default=50,
        ge=1,
        le=1000,
        description="Maximum number of undo snapshots kept per session"
    )
    paste_offset_x: float = Field(
        default=50,
        description="Horizontal offset applied to pasted/duplicated nodes"
    )
    paste_offset_y: float = Field(
        default=50,
        description="Vertical offset applied to pasted/duplicated nodes"
    )
    max_symbols: int = Field(
        default=4,
        ge=1,
        le=50,
        description="Maximum number of symbols a workflow can run against"
    )
    default_symbol: str = Field(
        default="TCS",
        description="Symbol used for new workflows and dropped cards"
    )

    # Execution Settings
    step_delay: float = Field(
        default=0.0,
        ge=0.0,
        description="Seconds to pause before each (node, symbol) step"
    )

    # Layout Settings
    layout_direction: Literal["TB", "LR"] = Field(
        default="TB",
        description="Auto-layout direction: top-to-bottom or left-to-right"
    )
    node_width: float = Field(default=240, gt=0)
    node_height: float = Field(default=140, gt=0)
    horizontal_spacing: float = Field(default=80, ge=0)
    vertical_spacing: float = Field(default=100, ge=0)

    # Logging
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Log level for the cardflow logger"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="CARDFLOW_",
        case_sensitive=False,
        extra="ignore",
    )

    def __init__(self, **kwargs):
        """Initialize config and validate cross-field settings."""
        # Load .env file manually to ensure it's loaded before pydantic processes it
        from dotenv import load_dotenv
        load_dotenv()

        super().__init__(**kwargs)

        self._validate_config()

    def _validate_config(self):
        """Validate configuration and provide helpful error messages."""
        errors = []

        if not self.default_symbol.strip():
            errors.append("CARDFLOW_DEFAULT_SYMBOL must not be blank.")

        if not self.workflows_file.endswith(".json"):
            errors.append(
                f"CARDFLOW_WORKFLOWS_FILE must be a .json file "
                f"(got '{self.workflows_file}')."
            )

        if errors:
            from cardflow.core.exceptions import ConfigurationError
            error_msg = "\n\nConfiguration Errors:\n" + "\n".join(f"  - {err}" for err in errors)
            raise ConfigurationError(error_msg)

    @property
    def workflows_path(self) -> Path:
        """Full path of the saved-workflows file."""
        return self.data_dir / self.workflows_file

    def layout_options(self):
        """Build LayoutOptions from the configured layout defaults."""
        from cardflow.graph.layout import LayoutOptions
        return LayoutOptions(
            direction=self.layout_direction,
            node_width=self.node_width,
            node_height=self.node_height,
            horizontal_spacing=self.horizontal_spacing,
            vertical_spacing=self.vertical_spacing,
        )

    def get_data_path(self, *parts: str) -> Path:
        """Get path within data directory."""
        return self.data_dir.joinpath(*parts)


# Singleton instance with thread-safe initialization
_config_instance: Optional[CardflowConfig] = None
_config_lock = threading.Lock()


def get_config(**kwargs) -> CardflowConfig:
    """
    Get or create the global configuration instance.

    Thread-safe singleton pattern using double-checked locking.

    Args:
        **kwargs: Optional configuration overrides (only used on first call)

    Returns:
        CardflowConfig instance
    """
    global _config_instance
    if _config_instance is None:
        with _config_lock:
            if _config_instance is None:
                _config_instance = CardflowConfig(**kwargs)
    return _config_instance


def reset_config():
    """Reset the global configuration instance (mainly for testing)."""
    global _config_instance
    with _config_lock:
        _config_instance = None
