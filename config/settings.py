"""
Configuration for the Growth Z-Score rule function service.
"""
import os
from pathlib import Path

# ── Paths ─────────────────────────────────────────────────────
PROJECT_ROOT = Path(__file__).resolve().parent.parent

# ── Server ────────────────────────────────────────────────────
PORT = int(os.environ.get("PORT", 8000))
HOST = os.environ.get("HOST", "0.0.0.0")
DEBUG = os.environ.get("DEBUG", "false").lower() == "true"
LOG_LEVEL = os.environ.get("LOG_LEVEL", "DEBUG" if DEBUG else "INFO").upper()

# ── Auth (optional) ───────────────────────────────────────────
AUTH_ENABLED = os.environ.get("AUTH_ENABLED", "false").lower() == "true"
AUTH_USERNAME = os.environ.get("AUTH_USERNAME", "admin")
AUTH_PASSWORD = os.environ.get("AUTH_PASSWORD", "changeme")

# ── Z-Score Reference Tables ─────────────────────────────────
# Version component of every table key; the shipped data is version 1.
ZSCORE_TABLE_VERSION = int(os.environ.get("ZSCORE_TABLE_VERSION", 1))

# 'legacy' reproduces the rule engine's historical bracket scan,
# 'nearest' uses the tight lower/upper bracket.
ZSCORE_BRACKET_STRATEGY = os.environ.get(
    "ZSCORE_BRACKET_STRATEGY", "legacy"
).lower()

# Age (months) and weight (kg) arguments must parse into this range.
ARGUMENT_MIN = 0
ARGUMENT_MAX = 127

# Tokens classified as male; everything else is female.
MALE_CODES = frozenset({
    "male", "MALE", "Male", "ma", "m", "M", "0", "false",
})
