"""
ParkHub API constants.

Central location for endpoint templates and client defaults.
Runtime overrides are read by ``ClientConfig.from_env`` (see settings.py).
"""

# ParkHub API
API_BASE_URL = "https://api.parkhub.com"
LANDMARK_ID = "7fc72127-c601-46f3-849b-0fdea9f370ae"

# Endpoint templates ({landmark} is substituted per request)
EVENTS_PATH = "/events/{landmark}"
PASSES_PATH = "/{landmark}/passes"
CREATE_PASS_PATH = "/{landmark}/passes"

# Client defaults
DEFAULT_TIMEOUT_SECONDS = 10.0
DEFAULT_MAX_RETRIES = 3
DEFAULT_BASE_DELAY_MS = 300.0
DEFAULT_MAX_DELAY_MS = 3000.0

# Batch creation
DEFAULT_CHUNK_SIZE = 10
MAX_CHUNK_SIZE = 50

# Environment variables read by ClientConfig.from_env()
ENV_API_KEY = "PARKHUB_API_KEY"
ENV_BASE_URL = "PARKHUB_BASE_URL"
ENV_LANDMARK_ID = "PARKHUB_LANDMARK_ID"
ENV_TIMEOUT = "PARKHUB_TIMEOUT"
ENV_MAX_RETRIES = "PARKHUB_MAX_RETRIES"
ENV_BATCH_SIZE = "PARKHUB_BATCH_SIZE"

# Accepted API key shape (alphanumeric plus - _ .)
API_KEY_PATTERN = r"^[A-Za-z0-9\-_.]{32,128}$"
