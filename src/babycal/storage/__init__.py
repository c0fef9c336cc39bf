"""Persistence for babycal.

- achievements: JSON file of achievement records keyed by day
- export: one-file export of the profile and all achievements
"""

from .achievements import (
    AchievementStore,
    StoreCorruptedError,
    StoreError,
    get_store_path,
)
from .export import export_json

__all__ = [
    "AchievementStore",
    "StoreCorruptedError",
    "StoreError",
    "export_json",
    "get_store_path",
]
