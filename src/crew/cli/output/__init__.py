"""Terminal output helpers for CLI commands."""
