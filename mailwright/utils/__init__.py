"""Shared utilities: configuration, errors, logging."""
