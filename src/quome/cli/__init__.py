"""Quome command-line interface."""
