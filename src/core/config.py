"""
Configuration constants and environment setup.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# =============================================================================
# PATHS
# =============================================================================

PROJECT_ROOT = Path(__file__).parent.parent.parent
DB_PATH = PROJECT_ROOT / "data" / "db" / "pocketplan.db"

# =============================================================================
# UPSTREAM BACKEND
# =============================================================================

API_BASE_URL = os.environ.get("API_BASE_URL", "http://localhost:8000/api")
HTTP_CLIENT_TIMEOUT = float(os.environ.get("HTTP_CLIENT_TIMEOUT", "10"))

# Endpoints that must never trigger a token refresh on 401
AUTH_ENDPOINTS = ("/auth/login/", "/auth/signup/", "/auth/refresh/")
REFRESH_ENDPOINT = "/auth/refresh/"

# Credentials used by the grid API and CLI scripts to open an upstream session
PLANNER_EMAIL = os.environ.get("PLANNER_EMAIL", "")
PLANNER_PASSWORD = os.environ.get("PLANNER_PASSWORD", "")

# =============================================================================
# CALENDAR CONFIGURATION
# =============================================================================

DEFAULT_EVENT_COLOR = "#3B82F6"
GRID_WEEKS = 6
GRID_CELLS = GRID_WEEKS * 7  # fixed-height grid regardless of month length
WEEKDAY_LABELS = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")

# =============================================================================
# API CONFIGURATION
# =============================================================================

PLANNER_API_KEY = os.environ.get("PLANNER_API_KEY", "")
API_HOST = os.environ.get("API_HOST", "0.0.0.0")
API_PORT = int(os.environ.get("API_PORT", "8100"))
API_DEBUG = os.environ.get("API_DEBUG", "false").lower() == "true"
API_VERSION = "1.0.0"
