"""
Common database constants and utilities

File: database/common.py
Created: 2025-12-23
Last Modified: 2026-01-09
"""

from pathlib import Path
from typing import Optional, Union

DATA_DIR = Path(__file__).parent.parent.parent / "data"
LOCAL_DB_PATH = DATA_DIR / "smartscan.db"


def resolve_db_path(db_path: Optional[Union[str, Path]] = None) -> Path:
    """Use the given path, or the default local database."""
    return Path(db_path) if db_path else LOCAL_DB_PATH


__all__ = [
    "DATA_DIR",
    "LOCAL_DB_PATH",
    "resolve_db_path",
]
