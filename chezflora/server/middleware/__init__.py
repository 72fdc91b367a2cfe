"""
Middleware modules for the ChezFlora server.
"""

from .timing import RequestTimingMiddleware

__all__ = ["RequestTimingMiddleware"]
