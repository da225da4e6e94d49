"""Command-line interface for session-validator."""
