"""Shared helpers for logging and console output."""
