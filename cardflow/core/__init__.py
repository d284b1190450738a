#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Core infrastructure for Cardflow.
"""

from .config import CardflowConfig, get_config, reset_config
from .exceptions import (
    CardflowException,
    ConfigurationError,
    GraphError,
    InvalidReferenceError,
    DuplicateIdError,
    NodeNotFoundError,
    GraphLockedError,
    ExecutionError,
    ExecutionInProgressError,
    RunBlockedError,
    ConfirmationRequired,
    StorageError,
)
from .logging import setup_logging, get_logger
from .result import Result

__all__ = [
    # Config
    "CardflowConfig",
    "get_config",
    "reset_config",
    # Exceptions
    "CardflowException",
    "ConfigurationError",
    "GraphError",
    "InvalidReferenceError",
    "DuplicateIdError",
    "NodeNotFoundError",
    "GraphLockedError",
    "ExecutionError",
    "ExecutionInProgressError",
    "RunBlockedError",
    "ConfirmationRequired",
    "StorageError",
    # Logging
    "setup_logging",
    "get_logger",
    # Results
    "Result",
]
