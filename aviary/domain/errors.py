# aviary/domain/errors.py
"""Errors raised by the use cases and surfaced by the CLI/TUI."""


class ValidationError(ValueError):
    """Invalid form input (missing field, bad number, unknown choice)."""


class AuthenticationError(Exception):
    """Username/password did not match the selected role."""
