"""Command-line tools for the Talon protocol."""
