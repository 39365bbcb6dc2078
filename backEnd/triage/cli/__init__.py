"""Command-line interface for repository triage."""
