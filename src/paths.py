"""Centralised path constants for the application."""

from pathlib import Path

# Project root is 2 levels up from this file (src/paths.py -> project root)
PROJECT_ROOT = Path(__file__).resolve().parent.parent

# Credentials and overrides for local runs, read by settings and the CLI
ENV_FILE = PROJECT_ROOT / ".env"
