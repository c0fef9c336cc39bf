"""Export of the profile and all achievements to a single JSON document."""

import json
import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from babycal.models import Settings
from babycal.storage.achievements import AchievementStore, StoreError

logger = logging.getLogger(__name__)

EXPORT_SCHEMA_VERSION = 1


def build_export_payload(
    settings: Settings, store: AchievementStore, now: datetime | None = None
) -> dict[str, Any]:
    """Build the export document.

    Returns:
        Dict with schemaVersion, exportedAt, profile and achievements
    """
    now = now or datetime.now(UTC)
    profile = settings.profile
    return {
        "schemaVersion": EXPORT_SCHEMA_VERSION,
        "exportedAt": now.isoformat(),
        "profile": {
            "name": profile.name,
            "birthDate": profile.birth_date.isoformat() if profile.birth_date else "",
            "dueDate": profile.due_date.isoformat() if profile.due_date else None,
        },
        "achievements": {
            key: [
                item.model_dump(mode="json", by_alias=True, exclude_none=True)
                for item in items
            ]
            for key, items in sorted(store.get_all().items())
        },
    }


def export_file_name(now: datetime) -> str:
    """File name of an export made at ``now``."""
    return f"babycal_export_{now:%Y%m%d_%H%M}.json"


def export_json(
    settings: Settings,
    store: AchievementStore,
    output_dir: Path,
    now: datetime | None = None,
) -> Path:
    """Write the export document into ``output_dir``.

    Returns:
        Path of the written file

    Raises:
        StoreError: If the file cannot be written
    """
    now = now or datetime.now(UTC)
    payload = build_export_payload(settings, store, now)
    output_path = output_dir.expanduser() / export_file_name(now)

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with output_path.open("w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2, ensure_ascii=False)
            f.write("\n")
    except OSError as e:
        raise StoreError(f"Failed to write export to {output_path}: {e}") from e

    logger.info("Exported %d day(s) to %s", len(payload["achievements"]), output_path)
    return output_path
