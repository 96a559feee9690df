"""Service settings read from the environment."""

import os

# Uploads larger than this are rejected before analysis
MAX_UPLOAD_BYTES = int(os.environ.get("UX_AUDIT_MAX_UPLOAD_BYTES", 10 * 1024 * 1024))

# Per-screenshot analysis timeout for batch requests
ANALYSIS_TIMEOUT_SECONDS = float(os.environ.get("UX_AUDIT_TIMEOUT_SECONDS", 30))

LOG_LEVEL = os.environ.get("UX_AUDIT_LOG_LEVEL", "INFO").upper()
