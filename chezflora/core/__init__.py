"""
Core utilities and configuration for ChezFlora.

This package provides core functionality including logging configuration,
error types, security helpers, database setup, and other shared utilities.
"""

from chezflora.core.logging_config import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
