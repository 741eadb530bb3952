"""Centralized path definitions for mailwright.

Nothing here is created on import.
"""

from pathlib import Path

# Base application directory
MAILWRIGHT_DIR = Path.home() / ".mailwright"

# Specific files
CONFIG_PATH = MAILWRIGHT_DIR / "config.json"
