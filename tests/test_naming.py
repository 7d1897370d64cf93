from __future__ import annotations

import pytest

from genfrom.naming import scoped_package_name, slugify, suggest_package_names


@pytest.mark.parametrize(
    "value, expected",
    [
        ("My Project", "my-project"),
        ("   My    Project  ", "my-project"),
        ("Project! @ 2025", "project-2025"),
        ("Café ☕", "cafe"),
        ("snake_case_name", "snake-case-name"),
        ("", ""),
    ],
)
def test_slugify_basic(value, expected):
    assert slugify(value) == expected


@pytest.mark.parametrize(
    "username, project, expected",
    [
        ("john", "Awesome App", "@john/awesome-app"),
        ("John", "awesome-app", "@john/awesome-app"),
        ("", "awesome-app", "awesome-app"),
        ("john", "!!!", "@john/project"),
    ],
)
def test_scoped_package_name(username, project, expected):
    assert scoped_package_name(username, project) == expected


def test_suggest_package_names_orders_plain_name_first():
    assert suggest_package_names("john", "Awesome App") == ["awesome-app", "@john/awesome-app"]


def test_suggest_package_names_without_username_has_no_duplicates():
    assert suggest_package_names("", "demo") == ["demo"]
