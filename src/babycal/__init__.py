"""babycal - baby age calendar with corrected age for premature births and
an achievement log."""

__version__ = "0.1.0"

from babycal.cli.app import main

__all__ = ["main"]
