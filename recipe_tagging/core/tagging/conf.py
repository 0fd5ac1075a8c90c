"""
Settings for the tagging app.

Projects override any of these through a ``RECIPE_TAGGING`` dict in their
Django settings, e.g.::

    RECIPE_TAGGING = {
        "LEAF_COUNT_FORMAT": "{count} items",
        "BULK_BATCH_SIZE": 1000,
    }
"""
from __future__ import annotations

from typing import Any

from django.conf import settings

DEFAULTS: dict[str, Any] = {
    # Marker shown on a node that has children and can be drilled into.
    "DRILL_DOWN_MARKER": "▼",
    # Marker shown on a leaf node; formatted with the number of matching items.
    "LEAF_COUNT_FORMAT": "{count} 件",
    # Rows per INSERT statement when replacing a taxonomy.
    "BULK_BATCH_SIZE": 500,
    # Default and maximum page sizes for item listings.
    "PAGE_SIZE": 12,
    "MAX_PAGE_SIZE": 100,
}


def get_setting(name: str) -> Any:
    """
    Returns the configured value of ``name``, falling back to our default.

    Raises KeyError for unknown setting names.
    """
    if name not in DEFAULTS:
        raise KeyError(f"Unknown RECIPE_TAGGING setting: {name}")
    overrides = getattr(settings, "RECIPE_TAGGING", None) or {}
    return overrides.get(name, DEFAULTS[name])
