import pytest

from aviary.domain.access import FEATURES, authenticate, can_view, visible_features
from aviary.domain.errors import AuthenticationError, ValidationError


def test_authenticate_returns_role():
    assert authenticate("admin", "admin", "admin123") == "admin"
    assert authenticate("worker", "worker", "worker123") == "worker"


@pytest.mark.parametrize(
    "role,username,password",
    [
        ("admin", "admin", "wrong"),
        ("admin", "worker", "worker123"),
        ("worker", "admin", "admin123"),
        ("worker", "", ""),
    ],
)
def test_authenticate_rejects_bad_credentials(role, username, password):
    with pytest.raises(AuthenticationError, match="Invalid credentials"):
        authenticate(role, username, password)


def test_authenticate_unknown_role():
    with pytest.raises(ValidationError):
        authenticate("owner", "admin", "admin123")


def test_capability_table():
    for feature in ("overview", "production", "feed", "inventory"):
        assert can_view("admin", feature)
        assert can_view("worker", feature)
    for feature in ("medication", "batch", "debeaking", "inventory-export"):
        assert can_view("admin", feature)
        assert not can_view("worker", feature)
    assert not can_view("admin", "reports")


def test_visible_features_keep_menu_order():
    assert visible_features("admin") == list(FEATURES)
    assert visible_features("worker") == ["overview", "production", "feed", "inventory"]
    assert visible_features("guest") == []
