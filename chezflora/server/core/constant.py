"""
Application-wide constants for the ChezFlora server.
"""

PROJECT_NAME = "ChezFlora"
API_V1_STR = "/api/v1"
API_VERSION = "1.0.0"
SCHEMA_VERSION = "v1"
GUEST_CART_HEADER = "X-Guest-Cart"
