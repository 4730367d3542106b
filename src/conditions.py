"""Classification of free-text weather conditions into a closed category set.

The same ordered keyword table backs the background theme, the header
tint, the day icons and the advisories, so a given condition text always
lands in the same category everywhere.
"""

from __future__ import annotations

from enum import Enum


class Category(str, Enum):
    """Closed set of condition classes."""

    RAIN = "rain"
    CLEAR = "clear"
    CLOUDY = "cloudy"
    SNOW = "snow"
    FOG = "fog"
    STORM = "storm"
    WINDY = "windy"
    UNCLASSIFIED = "unclassified"


# Checked top to bottom; first match wins.
_KEYWORDS: tuple[tuple[Category, tuple[str, ...]], ...] = (
    (Category.RAIN, ("rain", "drizzle")),
    (Category.CLEAR, ("sunny", "clear")),
    (Category.CLOUDY, ("cloud",)),
    (Category.SNOW, ("snow",)),
    (Category.FOG, ("fog", "mist")),
    (Category.STORM, ("thunder", "storm")),
    (Category.WINDY, ("wind",)),
)


def classify(condition_text: str | None) -> Category:
    """Map a condition string (e.g. "Patchy rain possible") to a Category.

    Matching is plain substring containment on the lowercased text; no
    punctuation or accent folding is done.
    """
    if not condition_text:
        return Category.UNCLASSIFIED
    lower = condition_text.lower()
    for category, keywords in _KEYWORDS:
        if any(k in lower for k in keywords):
            return category
    return Category.UNCLASSIFIED
