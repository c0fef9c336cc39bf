"""Command-line interface for babycal."""
