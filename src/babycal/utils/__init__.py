"""Shared utilities: environment/path resolution and logging setup."""
