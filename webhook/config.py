"""Centralized configuration for the fitment webhook service."""

import os
from pathlib import Path

# Determine project root (parent of 'webhook' directory)
_THIS_DIR = Path(__file__).parent
_PROJECT_ROOT = _THIS_DIR.parent

# Flask app settings (allow env overrides; default debug off for safety)
# Hosting platforms set PORT dynamically; fall back to FLASK_PORT or 5000 for local.
FLASK_HOST = os.getenv("FLASK_HOST", "0.0.0.0")
FLASK_PORT = int(os.getenv("FLASK_PORT", os.getenv("PORT", "5000")))
FLASK_DEBUG = os.getenv("FLASK_DEBUG", "False").lower() == "true"

# Record store: "sqlite" (local file) or "supabase"
STORE_BACKEND = os.getenv("STORE_BACKEND", "sqlite").lower()
FITMENT_DB_PATH = os.getenv("FITMENT_DB_PATH", str(_PROJECT_ROOT / "data" / "fitment.db"))
YMM_TABLE = os.getenv("YMM_TABLE", "ymm")
SUPABASE_URL = os.getenv("SUPABASE_URL", "")
SUPABASE_SERVICE_ROLE_KEY = os.getenv("SUPABASE_SERVICE_ROLE_KEY", "")
STORE_TIMEOUT = float(os.getenv("STORE_TIMEOUT", "15"))

# Threads used to sync the fitments of one product
SYNC_MAX_WORKERS = int(os.getenv("SYNC_MAX_WORKERS", "1"))

# Product webhooks are relayed to {FORWARD_BASE_URL}/api/update-ymm.
# Unset means the relay handles the payload in-process.
FORWARD_BASE_URL = os.getenv("FORWARD_BASE_URL", os.getenv("DOMAIN", ""))
FORWARD_TIMEOUT = float(os.getenv("FORWARD_TIMEOUT", "15"))

LOG_TO_FILE = os.getenv("LOG_TO_FILE", "True").lower() == "true"
