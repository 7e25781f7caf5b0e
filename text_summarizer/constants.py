"""Defaults shared by the pipeline, the command line and the inspector app."""

from __future__ import annotations

# Command surface
DEFAULT_TARGET_SIZE = 1024      # characters
DEFAULT_TIMEOUT = 5.0           # seconds
DEFAULT_MAX_ITERATIONS = 200

# Ranking
DEFAULT_DAMPING = 0.85
DEFAULT_TOLERANCE = 1e-6

# Acquisition
DEFAULT_REQUEST_TIMEOUT = 10    # seconds
USER_AGENT = "Mozilla/5.0 (compatible; text-summarizer/0.1)"
