# aviary/domain/access.py
"""
Roles, feature visibility and the placeholder login.

The credential check is a fixed table comparison used to pick the role
for the session; it is not a security boundary. Visibility is a
capability table consulted by the CLI and TUI menus, nothing enforces
it underneath.
"""

from __future__ import annotations

from typing import Dict, FrozenSet, List

from aviary.domain.errors import AuthenticationError, ValidationError

ROLES = ("admin", "worker")

_CREDENTIALS: Dict[str, Dict[str, str]] = {
    "admin": {"username": "admin", "password": "admin123"},
    "worker": {"username": "worker", "password": "worker123"},
}

# feature area -> roles allowed to see it (menu order)
FEATURES: Dict[str, FrozenSet[str]] = {
    "overview": frozenset({"admin", "worker"}),
    "production": frozenset({"admin", "worker"}),
    "feed": frozenset({"admin", "worker"}),
    "medication": frozenset({"admin"}),
    "batch": frozenset({"admin"}),
    "debeaking": frozenset({"admin"}),
    "inventory": frozenset({"admin", "worker"}),
    "inventory-export": frozenset({"admin"}),
}

FEATURE_LABELS: Dict[str, str] = {
    "overview": "Overview",
    "production": "Egg Production",
    "feed": "Feed Management",
    "medication": "Medication",
    "batch": "Batch Management",
    "debeaking": "Debeaking",
    "inventory": "Inventory",
    "inventory-export": "Inventory Export",
}


def authenticate(role: str, username: str, password: str) -> str:
    """Check the credentials of the selected role and return the role."""
    if role not in ROLES:
        raise ValidationError(f"unknown role: {role!r}")
    expected = _CREDENTIALS[role]
    if username != expected["username"] or password != expected["password"]:
        raise AuthenticationError("Invalid credentials")
    return role


def can_view(role: str, feature: str) -> bool:
    return role in FEATURES.get(feature, frozenset())


def visible_features(role: str) -> List[str]:
    return [f for f, roles in FEATURES.items() if role in roles]
