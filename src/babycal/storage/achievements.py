"""Achievement record storage.

Achievements are kept in a single JSON file mapping a day key (YYYY-MM-DD)
to the list of achievements recorded on that day:

    {
      "2025-11-03": [
        {"id": "...", "date": "2025-11-03", "type": "did", "title": "...",
         "createdAt": "...", "updatedAt": "..."}
      ]
    }

Older files stored a flat list of achievements (either at the top level or
under an "achievements" key); those are migrated to the mapping on load.

The default file lives at ~/.local/share/babycal/achievements.json
"""

import json
import logging
from collections.abc import Iterable
from datetime import UTC, date, datetime
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from babycal.dates import InvalidDateFormat, parse_month, parse_strict, to_key
from babycal.graph import records_from_store
from babycal.models import ACHIEVEMENTS_FILE_NAME, Achievement, GraphRecord, StoreStats
from babycal.utils.env import get_data_dir

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Base exception for achievement store errors."""

    pass


class StoreCorruptedError(StoreError):
    """Achievement file is corrupted and cannot be parsed."""

    pass


def _normalize_key(raw: object) -> str | None:
    """Normalize a day key, or None (with a warning) when it is invalid."""
    try:
        return to_key(parse_strict(raw))  # type: ignore[arg-type]
    except InvalidDateFormat as e:
        logger.warning("Skipping achievements with invalid date key: %s", e)
        return None


def _is_map_format(data: object) -> bool:
    if not isinstance(data, dict):
        return False
    # the day key is the date, records need not repeat it
    return all(
        isinstance(items, list) and all(isinstance(item, dict) for item in items)
        for items in data.values()
    )


def _group_by_date(items: Iterable[Any]) -> dict[str, list[dict[str, Any]]]:
    grouped: dict[str, list[dict[str, Any]]] = {}
    for item in items:
        if not isinstance(item, dict) or not item.get("date"):
            logger.warning("Skipping achievement without a date: %r", item)
            continue
        key = _normalize_key(item["date"])
        if key is None:
            continue
        grouped.setdefault(key, []).append(item)
    return grouped


def migrate_raw_store(data: object) -> dict[str, list[dict[str, Any]]]:
    """Bring any known on-disk shape into the ``{day_key: [record, ...]}`` form.

    Args:
        data: Decoded JSON document

    Returns:
        Mapping of normalized day keys to raw record dicts

    Raises:
        StoreCorruptedError: If the document has none of the known shapes
    """
    # checked first: {"achievements": [...]} also looks like a day mapping
    if isinstance(data, dict) and isinstance(data.get("achievements"), list):
        logger.info("Migrating achievements from list-under-key format")
        return _group_by_date(data["achievements"])

    if _is_map_format(data):
        normalized: dict[str, list[dict[str, Any]]] = {}
        for raw_key, items in data.items():  # type: ignore[union-attr]
            key = _normalize_key(raw_key)
            if key is None:
                continue
            normalized.setdefault(key, []).extend(
                {**item, "date": key} for item in items
            )
        return normalized

    if isinstance(data, list):
        logger.info("Migrating achievements from flat list format")
        return _group_by_date(data)

    raise StoreCorruptedError(
        "Unrecognized achievements format: expected a mapping of YYYY-MM-DD "
        "days to lists of achievements"
    )


class AchievementStore:
    """Manages the achievement records file.

    Examples:
        # Use default path
        store = AchievementStore()
        store.load()
        store.upsert(Achievement(date="2025-11-03", type="did", title="Rolled over"))
        store.save()

        counts = store.counts_by_day("2025-11")
    """

    def __init__(self, store_path: Path | str | None = None) -> None:
        """Initialize the store.

        Args:
            store_path: Path to achievements.json. If None, uses default
                location (~/.local/share/babycal/achievements.json)
        """
        self.store_path = (
            Path(store_path) if store_path else self._get_default_store_path()
        )
        self._records: dict[str, list[Achievement]] = {}
        self._loaded = False

    @staticmethod
    def _get_default_store_path() -> Path:
        """Get default path for achievements.json."""
        return get_data_dir() / ACHIEVEMENTS_FILE_NAME

    def load(self) -> None:
        """Load achievements from the JSON file.

        A missing file means no achievements yet.

        Raises:
            StoreCorruptedError: If the file or one of its records is invalid
        """
        if not self.store_path.exists():
            self._records = {}
            self._loaded = True
            return

        try:
            with self.store_path.open(encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise StoreCorruptedError(
                f"Cannot parse {self.store_path}: {e}\n\n"
                "The achievements file has invalid JSON syntax."
            ) from e
        except OSError as e:
            raise StoreCorruptedError(
                f"Failed to read achievements from {self.store_path}: {e}"
            ) from e

        records: dict[str, list[Achievement]] = {}
        try:
            migrated = migrate_raw_store(data)
        except StoreCorruptedError as e:
            raise StoreCorruptedError(f"Cannot load {self.store_path}: {e}") from e

        for key, items in migrated.items():
            try:
                records[key] = [Achievement.model_validate(item) for item in items]
            except ValidationError as e:
                raise StoreCorruptedError(
                    f"Invalid achievement recorded on {key}: {e}"
                ) from e

        self._records = records
        self._loaded = True
        logger.debug(
            "Loaded %d achievement(s) on %d day(s) from %s",
            sum(len(items) for items in records.values()),
            len(records),
            self.store_path,
        )

    def save(self) -> None:
        """Save achievements to the JSON file.

        Creates parent directory if it doesn't exist.
        Sets file permissions to 600 (owner read/write only).

        Raises:
            StoreError: If save operation fails
        """
        data = {
            key: [
                item.model_dump(mode="json", by_alias=True, exclude_none=True)
                for item in self._records[key]
            ]
            for key in sorted(self._records)
        }
        try:
            self.store_path.parent.mkdir(parents=True, exist_ok=True)
            with self.store_path.open("w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
                f.write("\n")
            self.store_path.chmod(0o600)
        except OSError as e:
            raise StoreError(f"Failed to save achievements: {e}") from e

    def _ensure_loaded(self) -> None:
        if not self._loaded:
            self.load()

    def get_all(self) -> dict[str, list[Achievement]]:
        """Get all achievements keyed by day (copies of the day lists)."""
        self._ensure_loaded()
        return {key: list(items) for key, items in self._records.items()}

    def list_by_date(self, day: date | str) -> list[Achievement]:
        """List achievements of one day in recording order.

        Raises:
            InvalidDateFormat: If day is a malformed string
        """
        self._ensure_loaded()
        return list(self._records.get(to_key(parse_strict(day)), []))

    def find(self, achievement_id: str) -> Achievement | None:
        """Find an achievement by id on any day."""
        self._ensure_loaded()
        for items in self._records.values():
            for item in items:
                if item.id == achievement_id:
                    return item
        return None

    def _remove_id(self, achievement_id: str) -> Achievement | None:
        for key, items in list(self._records.items()):
            for index, item in enumerate(items):
                if item.id == achievement_id:
                    del items[index]
                    if not items:
                        del self._records[key]
                    return item
        return None

    def upsert(
        self, achievement: Achievement, now: datetime | None = None
    ) -> Achievement:
        """Insert or update an achievement.

        Updating keeps the original creation time. An achievement whose date
        changed moves to its new day.

        Args:
            achievement: Record to store
            now: Timestamp to record (defaults to current UTC time)

        Returns:
            The stored record
        """
        self._ensure_loaded()
        now = now or datetime.now(UTC)
        key = to_key(achievement.date)

        existing = self._remove_id(achievement.id)
        if existing is not None:
            stored = achievement.model_copy(
                update={"created_at": existing.created_at, "updated_at": now}
            )
            logger.debug("Updated achievement %s on %s", achievement.id, key)
        else:
            stored = achievement.model_copy(
                update={"created_at": now, "updated_at": now}
            )
            logger.debug("Added achievement %s on %s", achievement.id, key)

        self._records.setdefault(key, []).append(stored)
        return stored

    def delete(self, achievement_id: str, day: date | str) -> bool:
        """Delete an achievement from a day.

        Days left without achievements are removed.

        Returns:
            True if an achievement was deleted
        """
        self._ensure_loaded()
        key = to_key(parse_strict(day))
        items = self._records.get(key)
        if not items:
            return False

        remaining = [item for item in items if item.id != achievement_id]
        if len(remaining) == len(items):
            return False
        if remaining:
            self._records[key] = remaining
        else:
            del self._records[key]
        return True

    def counts_by_day(self, month: str | None = None) -> dict[str, int]:
        """Count achievements per day, optionally within one YYYY-MM month.

        Raises:
            InvalidDateFormat: If month is not YYYY-MM
        """
        self._ensure_loaded()
        prefix = parse_month(month).strftime("%Y-%m-") if month else ""
        return {
            key: len(items)
            for key, items in sorted(self._records.items())
            if key.startswith(prefix) and items
        }

    def graph_records(self) -> list[GraphRecord]:
        """Per-day tried/did counts for the graph."""
        self._ensure_loaded()
        return records_from_store(self._records)

    def stats(self) -> StoreStats:
        """Summarize the store contents."""
        self._ensure_loaded()
        items = [item for day_items in self._records.values() for item in day_items]
        keys = sorted(self._records)
        return StoreStats(
            total_days=len(keys),
            total_achievements=len(items),
            did_count=sum(1 for item in items if item.type == "did"),
            tried_count=sum(1 for item in items if item.type == "tried"),
            first_day=keys[0] if keys else None,
            last_day=keys[-1] if keys else None,
            store_path=self.store_path,
            store_size_bytes=(
                self.store_path.stat().st_size if self.store_path.exists() else 0
            ),
        )


def get_store_path() -> Path:
    """Get default path for achievements.json."""
    return AchievementStore._get_default_store_path()
