"""Command-line interface for lottery-factor."""
