"""Interactive configuration wizard for babycal.

This module handles the questionnaire-based configuration setup,
separated from the core configuration management logic.
"""

import questionary

# All prompts use unsafe_ask() to propagate KeyboardInterrupt
# instead of returning None, allowing clean exit on Ctrl+C
from babycal.age import AgeFormat
from babycal.dates import InvalidDateFormat, parse_optional
from babycal.models import (
    DisplayConfig,
    Fields,
    ProfileConfig,
    Settings,
    StorageConfig,
)

NO_LIMIT = "none"


def _validate_optional_date(value: str) -> bool | str:
    try:
        parse_optional(value)
    except InvalidDateFormat:
        return "Use YYYY-MM-DD (or leave empty)"
    return True


def _validate_required_date(value: str) -> bool | str:
    if not value.strip():
        return "Birth date is required"
    return _validate_optional_date(value)


def _validate_limit(value: str) -> bool | str:
    value = value.strip().lower()
    if value in ("", NO_LIMIT) or value.isdigit():
        return True
    return f"Enter a number of months or '{NO_LIMIT}'"


def run_interactive_wizard(defaults: Settings | None) -> Settings:
    """Run interactive configuration wizard.

    Args:
        defaults: Optional existing settings to use as defaults

    Returns:
        Configured Settings instance
    """
    questionary.print("Welcome to babycal configuration!", style="bold")
    questionary.print("")

    profile = _get_profile_config(defaults)
    display = _get_display_config(defaults)
    storage = defaults.storage if defaults else StorageConfig()

    return Settings(profile=profile, display=display, storage=storage)


def _get_profile_config(defaults: Settings | None) -> ProfileConfig:
    """Get the child's profile interactively."""
    questionary.print("Profile:", style="bold")

    profile = defaults.profile if defaults else ProfileConfig()

    name = questionary.text(
        "Name:",
        default=profile.name,
        validate=lambda x: len(x.strip()) > 0 or "Name cannot be empty",
    ).unsafe_ask()

    birth_date = questionary.text(
        "Birth date (YYYY-MM-DD):",
        default=profile.birth_date.isoformat() if profile.birth_date else "",
        validate=_validate_required_date,
    ).unsafe_ask()

    due_date = questionary.text(
        "Due date (YYYY-MM-DD, empty if unknown):",
        default=profile.due_date.isoformat() if profile.due_date else "",
        validate=_validate_optional_date,
    ).unsafe_ask()

    return ProfileConfig(
        name=name.strip(),
        birth_date=birth_date.strip(),
        due_date=due_date.strip() or None,
    )


def _get_display_config(defaults: Settings | None) -> DisplayConfig:
    """Get display preferences interactively."""
    questionary.print("\nDisplay:", style="bold")

    display = defaults.display if defaults else DisplayConfig()

    age_format = questionary.select(
        "Age format:",
        choices=[
            questionary.Choice("Months and days (14m3d)", value=AgeFormat.MD.value),
            questionary.Choice(
                "Years, months and days (1y2m3d)", value=AgeFormat.YMD.value
            ),
        ],
        default=display.age_format.value,
    ).unsafe_ask()

    default_limit = display.show_corrected_until_months
    limit = questionary.text(
        "Show corrected age until how many months after the due date "
        f"('{NO_LIMIT}' for no limit):",
        default=NO_LIMIT if default_limit is None else str(default_limit),
        validate=_validate_limit,
    ).unsafe_ask()
    limit = limit.strip().lower()
    if not limit:
        limit_months = Fields(DisplayConfig).show_corrected_until_months.default
    elif limit == NO_LIMIT:
        limit_months = None
    else:
        limit_months = int(limit)

    show_days = questionary.confirm(
        "Show days since birth in the day view?",
        default=display.show_days_since_birth,
    ).unsafe_ask()

    premature = questionary.confirm(
        "Show corrected age on graphs for premature births?",
        default=display.enable_premature_display,
    ).unsafe_ask()

    return DisplayConfig(
        age_format=AgeFormat(age_format),
        show_corrected_until_months=limit_months,
        show_days_since_birth=show_days,
        enable_premature_display=premature,
    )
