"""Command-line interface for the secplus-study pipeline."""
