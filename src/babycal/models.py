"""Data models for babycal settings, achievements and computed views.

Input data (settings, achievement records) are Pydantic models so that
everything coming from the settings file or the achievement store is
validated at the boundary. Computed views (age labels, calendar cells,
graph buckets) are frozen dataclasses: plain immutable values produced
fresh on every call.
"""

import uuid
from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from pathlib import Path
from typing import Annotated, Literal

import yaml
from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
)
from pydantic.alias_generators import to_camel
from pydantic.fields import FieldInfo

from babycal.age import AgeFormat, AgeParts
from babycal.dates import parse_optional, parse_strict
from babycal.utils.env import get_data_dir


class Fields:
    """Proxy class for accessing Pydantic model field info via attributes.

    Enables syntax like `Fields(DisplayConfig).age_format.default` instead of
    `DisplayConfig.model_fields["age_format"].default`.
    """

    def __init__(self, model_class: type[BaseModel]) -> None:
        self._model_class = model_class

    def __getattr__(self, name: str) -> FieldInfo:
        """Provide access to field info via attribute access."""
        return self._model_class.model_fields[name]


# Maximum length of achievement titles and memos (in characters)
MAX_TEXT_LENGTH = 500

DEFAULT_CORRECTED_UNTIL_MONTHS = 24

ACHIEVEMENTS_FILE_NAME = "achievements.json"

Day = Annotated[date, BeforeValidator(parse_strict)]
OptionalDay = Annotated[date | None, BeforeValidator(parse_optional)]

AchievementType = Literal["did", "tried"]


def _validate_not_empty_string(v: str) -> str:
    """Validate string is not empty or whitespace only."""
    if not isinstance(v, str) or not v.strip():
        raise ValueError("Field cannot be empty")
    return v.strip()


NonEmptyStr = Annotated[str, BeforeValidator(_validate_not_empty_string)]


def _utc_now() -> datetime:
    return datetime.now(UTC)


class AgeSettings(BaseModel):
    """Profile and display settings consumed by the age computations.

    Accepts both the persisted camelCase keys (``birthDate``, ``dueDate``,
    ``ageFormat``, ``showCorrectedUntilMonths``) and snake_case names.
    An empty birth or due date string means "not set yet".
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    birth_date: OptionalDay = Field(
        default=None,
        description="Actual birth date",
    )
    due_date: OptionalDay = Field(
        default=None,
        description="Expected due date (enables corrected age)",
    )
    age_format: AgeFormat = Field(
        default=AgeFormat.MD,
        description="Age label format: 'md' (14m3d) or 'ymd' (1y2m3d)",
    )
    show_corrected_until_months: int | None = Field(
        default=DEFAULT_CORRECTED_UNTIL_MONTHS,
        ge=0,
        description=(
            "Hide corrected age this many months after the due date "
            "(None for no limit)"
        ),
    )


class Achievement(BaseModel):
    """A single recorded achievement ("did" something or "tried" something)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(
        default_factory=lambda: uuid.uuid4().hex,
        description="Unique identifier",
    )
    date: Day = Field(
        ...,
        description="Day of the achievement (YYYY-MM-DD)",
    )
    type: AchievementType = Field(
        ...,
        description="'did' for accomplished, 'tried' for attempted",
    )
    title: NonEmptyStr = Field(
        ...,
        max_length=MAX_TEXT_LENGTH,
        description="Short description of the achievement",
    )
    memo: str | None = Field(
        default=None,
        max_length=MAX_TEXT_LENGTH,
        description="Optional free-form note",
    )
    photo_path: str | None = Field(
        default=None,
        description="Path of an attached photo, if any",
    )
    created_at: datetime = Field(
        default_factory=_utc_now,
        description="When the record was created (UTC)",
    )
    updated_at: datetime = Field(
        default_factory=_utc_now,
        description="When the record was last updated (UTC)",
    )


class ProfileConfig(BaseModel):
    """The child whose age is tracked."""

    name: str = Field(
        default="Baby",
        description="Display name",
    )
    birth_date: OptionalDay = Field(
        default=None,
        description="Birth date (YYYY-MM-DD)",
    )
    due_date: OptionalDay = Field(
        default=None,
        description="Due date (YYYY-MM-DD), enables corrected age",
    )


class DisplayConfig(BaseModel):
    """How ages are displayed."""

    age_format: AgeFormat = Field(
        default=AgeFormat.MD,
        description="Age label format ('md' or 'ymd')",
    )
    show_corrected_until_months: int | None = Field(
        default=DEFAULT_CORRECTED_UNTIL_MONTHS,
        ge=0,
        description="Months after the due date to keep showing corrected age",
    )
    show_days_since_birth: bool = Field(
        default=True,
        description="Show the number of days since birth in the day view",
    )
    enable_premature_display: bool = Field(
        default=True,
        description="Annotate graphs with corrected age for premature births",
    )


class StorageConfig(BaseModel):
    """Where achievement records are stored."""

    achievements_path: str | None = Field(
        default=None,
        description=(
            "Path to the achievements JSON file "
            "(default: $XDG_DATA_HOME/babycal/achievements.json)"
        ),
    )

    def get_achievements_path(self) -> Path:
        """Get the resolved achievements file path."""
        if self.achievements_path:
            return Path(self.achievements_path).expanduser()
        return get_data_dir() / ACHIEVEMENTS_FILE_NAME


class Settings(BaseModel):
    """Root configuration loaded from ~/.config/babycal/settings.yaml."""

    profile: ProfileConfig = Field(
        default_factory=ProfileConfig,
        description="Child profile",
    )
    display: DisplayConfig = Field(
        default_factory=DisplayConfig,
        description="Display preferences",
    )
    storage: StorageConfig = Field(
        default_factory=StorageConfig,
        description="Storage locations",
    )

    def to_age_settings(self) -> AgeSettings:
        """Extract the subset of settings used by the age computations."""
        return AgeSettings(
            birth_date=self.profile.birth_date,
            due_date=self.profile.due_date,
            age_format=self.display.age_format,
            show_corrected_until_months=self.display.show_corrected_until_months,
        )

    @classmethod
    def from_yaml_file(cls, path: Path) -> "Settings":
        """Load settings from a YAML file.

        Args:
            path: Path to the YAML settings file

        Returns:
            Settings instance loaded from the file

        Raises:
            FileNotFoundError: If the settings file doesn't exist
            TypeError: If the YAML document is not a mapping
            ValueError: If validation fails
        """
        if not path.exists():
            raise FileNotFoundError(f"Settings file not found: {path}")

        with path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f)

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise TypeError(
                f"Invalid settings file format in {path}: expected a mapping"
            )

        return cls(**data)

    def to_yaml_file(self, path: Path) -> None:
        """Save settings to a YAML file.

        Args:
            path: Path where the settings file should be saved
        """
        path.parent.mkdir(parents=True, exist_ok=True)

        # None is kept: a null show_corrected_until_months means "no limit"
        data = self.model_dump(mode="json")

        with path.open("w", encoding="utf-8") as f:
            yaml.safe_dump(
                data,
                f,
                default_flow_style=False,
                allow_unicode=True,
                sort_keys=False,
            )

        path.chmod(0o600)


# Computed views


@dataclass(frozen=True)
class AgeLabels:
    """Age labels for one day.

    ``corrected`` is set exactly when ``suppressed`` is False.
    """

    chronological: str
    corrected: str | None = None
    suppressed: bool = True


@dataclass(frozen=True)
class AgeInfo:
    """Per-day detail: labels plus the underlying age parts."""

    labels: AgeLabels
    chronological: AgeParts
    corrected: AgeParts | None
    days_since_birth: int


@dataclass(frozen=True)
class CalendarCell:
    """One day of the 6x7 month grid."""

    date: date
    is_current_month: bool
    is_today: bool
    age_info: AgeLabels | None
    achievement_count: int = 0
    chronological_changed: bool = False
    corrected_changed: bool = False

    @property
    def key(self) -> str:
        """YYYY-MM-DD key of the cell's day."""
        return self.date.isoformat()

    @property
    def label_changed(self) -> bool:
        """True when either age reached a new month on this day."""
        return self.chronological_changed or self.corrected_changed


@dataclass(frozen=True)
class CalendarMonthView:
    """A month grid together with the month it displays."""

    year: int
    month: int
    cells: list[CalendarCell] = field(default_factory=list)


@dataclass(frozen=True)
class AxisLabelInfo:
    """X-axis label of one graph slot."""

    actual_label: str
    corrected_label: str | None
    show_actual_label: bool
    show_corrected_label: bool
    show_corrected_zero_line: bool


@dataclass(frozen=True)
class GraphRecord:
    """Achievement counts of one day, as fed into the graph."""

    date: date
    tried: int = 0
    did: int = 0


@dataclass(frozen=True)
class GraphBucket:
    """Aggregated counts of one graph slot (month or year of age)."""

    key: str
    tried_count: int
    did_count: int
    cumulative: int
    actual_label: str
    corrected_label: str | None = None
    show_actual_label: bool = True
    show_corrected_label: bool = False
    show_corrected_zero_line: bool = False


@dataclass(frozen=True)
class GraphResult:
    """Buckets and axis labels of one graph build."""

    buckets: list[GraphBucket]
    labels: list[AxisLabelInfo]

    @property
    def total(self) -> int:
        """Total tried + did across all buckets."""
        return self.buckets[-1].cumulative if self.buckets else 0


@dataclass
class StoreStats:
    """Achievement store statistics for display."""

    total_days: int
    total_achievements: int
    did_count: int
    tried_count: int
    first_day: str | None
    last_day: str | None
    store_path: Path
    store_size_bytes: int
