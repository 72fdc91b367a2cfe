"""
Exception handlers for the ChezFlora server.

Domain errors map to their declared status, constraint violations to 409 and
everything else to a logged 500.
"""

from .domain_handler import domain_exception_handler
from .global_handler import global_exception_handler, integrity_error_handler, setup_exception_handlers

__all__ = [
    "domain_exception_handler",
    "global_exception_handler",
    "integrity_error_handler",
    "setup_exception_handlers",
]
