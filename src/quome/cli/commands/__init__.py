"""Quome CLI commands."""
