"""CLI commands for previewctl."""
