"""Shared TUI helpers."""
