"""Configuration for the AQS query client.

Loads environment variables (optionally from a local ``.env``) and exposes the
HTTP tuning knobs used by the shared client. Credentials are not read here:
the environment variable names are, and the lookup happens at call time in
``aqs.credentials``.
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

load_dotenv()

# Environment variables holding the caller's AQS identity
EMAIL_ENV_VAR = "AQS_EMAIL"
KEY_ENV_VAR = "AQS_KEY"

# Service root; every request is {AQS_BASE_URL}/{service}/{endpoint}
AQS_BASE_URL = os.getenv("AQS_BASE_URL", "https://aqs.epa.gov/data/api").rstrip("/")

# HTTP tuning for the shared client
AQS_TIMEOUT = int(os.getenv("AQS_TIMEOUT", "120"))
AQS_RETRIES = int(os.getenv("AQS_RETRIES", "6"))
AQS_BACKOFF_FACTOR = float(os.getenv("AQS_BACKOFF_FACTOR", "1.5"))
AQS_RETRY_MAX_WAIT = int(os.getenv("AQS_RETRY_MAX_WAIT", "60"))

# AQS asks callers to pause between requests; 0 disables pacing
AQS_MIN_DELAY = float(os.getenv("AQS_MIN_DELAY", "0"))

USER_AGENT = "aqs-query/0.1.0"
