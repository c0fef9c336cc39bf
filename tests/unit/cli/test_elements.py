"""Tests for CLI elements module."""

import json
from datetime import date
from pathlib import Path

import pytest
import yaml

from babycal.age_service import compute_age_info
from babycal.cli import elements
from babycal.graph import build_buckets
from babycal.grid import build_month_view
from babycal.models import Achievement, AgeSettings, GraphRecord, StoreStats

from .conftest import console_text

SETTINGS = AgeSettings(birth_date="2025-10-01", due_date="2025-12-01")


class TestAgeInfo:
    """Tests for the age detail output."""

    @pytest.mark.unit
    def test_display(self, console):
        """Test both ages and the day count are shown."""
        info = compute_age_info(SETTINGS, "2026-01-15")

        elements.display_age_info(console, date(2026, 1, 15), info)

        output = console_text(console)
        assert "Age: 3m14d" in output
        assert "Corrected age: 1m14d" in output
        assert "Days since birth: 106" in output

    @pytest.mark.unit
    def test_display_hides_suppressed_and_days(self, console):
        """Test hidden corrected age and day count."""
        info = compute_age_info(AgeSettings(birth_date="2025-10-01"), "2026-01-15")

        elements.display_age_info(
            console, date(2026, 1, 15), info, show_days_since_birth=False
        )

        output = console_text(console)
        assert "Corrected age" not in output
        assert "Days since birth" not in output

    @pytest.mark.unit
    def test_json_without_birth_date(self):
        """Test JSON output when no age is known."""
        data = json.loads(elements.format_age_info_json(date(2026, 1, 15), None))
        assert data == {"date": "2026-01-15", "age": None}


class TestCalendar:
    """Tests for the month grid output."""

    @pytest.mark.unit
    def test_display(self, console):
        """Test the grid shows headers, days, ages and achievements."""
        view = build_month_view(
            date(2026, 1, 1), SETTINGS, {"2026-01-10": 3}, today=date(2026, 1, 15)
        )

        elements.display_calendar(console, view, title="Hana")

        output = console_text(console)
        assert "Hana 2026-01" in output
        assert "Sun" in output
        assert "Sat" in output
        assert "3m0d" in output
        assert "(1m0d)" in output
        assert "★3" in output


class TestGraph:
    """Tests for the graph output."""

    @pytest.mark.unit
    def test_display(self, console):
        """Test labels and counts appear in the table."""
        result = build_buckets(
            "1y",
            date(2025, 10, 1),
            date(2025, 12, 1),
            True,
            [GraphRecord(date=date(2025, 10, 2), did=2, tried=1)],
        )

        elements.display_graph(console, result, "1y")

        output = console_text(console)
        assert "Achievements (1y)" in output
        assert "0M" in output
        assert "修0M（予定日）" in output

    @pytest.mark.unit
    def test_json(self):
        """Test the JSON graph document."""
        result = build_buckets("all", date(2025, 10, 1), None, True, [])
        data = json.loads(elements.format_graph_json(result))
        assert data["buckets"][0]["key"] == "0Y"
        assert len(data["labels"]) == 1


class TestAchievements:
    """Tests for the achievement listings."""

    @pytest.fixture
    def achievements(self) -> dict[str, list[Achievement]]:
        """Two days of achievements."""
        return {
            "2025-11-04": [Achievement(date="2025-11-04", type="tried", title="B")],
            "2025-11-03": [
                Achievement(date="2025-11-03", type="did", title="A", memo="note")
            ],
        }

    @pytest.mark.unit
    def test_table(self, console, achievements):
        """Test the table lists every achievement."""

        elements.display_achievements_table(console, achievements)

        output = console_text(console)
        assert "2025-11-03" in output
        assert "note" in output
        assert "tried" in output

    @pytest.mark.unit
    def test_json_sorted(self, achievements):
        """Test JSON output is sorted by day with camelCase records."""
        data = json.loads(elements.format_achievements_json(achievements))
        assert list(data) == ["2025-11-03", "2025-11-04"]
        assert "createdAt" in data["2025-11-03"][0]

    @pytest.mark.unit
    def test_yaml(self, achievements):
        """Test YAML output."""
        data = yaml.safe_load(elements.format_achievements_yaml(achievements))
        assert data["2025-11-04"][0]["title"] == "B"


class TestStoreStats:
    """Tests for store statistics output."""

    @pytest.mark.unit
    def test_display(self, console):
        """Test statistics and file size are shown."""
        stats = StoreStats(
            total_days=2,
            total_achievements=3,
            did_count=2,
            tried_count=1,
            first_day="2025-11-03",
            last_day="2025-11-04",
            store_path=Path("/tmp/achievements.json"),
            store_size_bytes=2048,
        )

        elements.display_store_stats(console, stats)

        output = console_text(console)
        assert "Achievements: 3" in output
        assert "Range: 2025-11-03 to 2025-11-04" in output
        assert "2.0 KB" in output

    @pytest.mark.unit
    @pytest.mark.parametrize(
        ("size", "expected"),
        [(512, "512 B"), (1536, "1.5 KB"), (3 * 1024 * 1024, "3.0 MB")],
    )
    def test_file_size(self, size, expected):
        """Test human-readable file sizes."""
        assert elements._format_file_size(size) == expected
