"""
Pytest configuration and shared fixtures.

Provides a pair of design-token snapshots that differ in every way the
partition distinguishes: a new token, a removed token, a changed value,
a change deep inside a set, and a list that grew.
"""

import copy

import pytest


@pytest.fixture
def original_tokens() -> dict:
    """Token snapshot before the release."""
    return {
        "accent-color-100": {"value": "{blue-100}", "uuid": "0001"},
        "swatch-border-opacity": {"value": "0.42", "uuid": "0002"},
        "corner-radius-75": {"value": "3px", "uuid": "0003"},
        "focus-indicator-color": {
            "sets": {
                "light": {"value": "{blue-800}", "uuid": "0004"},
                "dark": {"value": "{blue-700}", "uuid": "0005"},
            }
        },
        "font-families": {"value": ["adobe-clean", "source-sans"], "uuid": "0006"},
    }


@pytest.fixture
def updated_tokens(original_tokens: dict) -> dict:
    """Token snapshot after the release (an independent copy, not shared)."""
    tokens = copy.deepcopy(original_tokens)
    del tokens["swatch-border-opacity"]
    tokens["corner-radius-75"]["value"] = "4px"
    tokens["focus-indicator-color"]["sets"]["dark"]["value"] = "{blue-600}"
    tokens["focus-indicator-color"]["sets"]["wireframe"] = {"value": "{gray-900}", "uuid": "0007"}
    tokens["font-families"]["value"].append("system-ui")
    tokens["accent-color-100"]["deprecated"] = True
    tokens["new-token"] = {"value": "8px", "uuid": "0008"}
    return tokens
