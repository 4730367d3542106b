"""Presentation tokens derived from a condition Category.

Every selector is total over Category: windy and unclassified fall back
to the default token instead of producing nothing.
"""

from __future__ import annotations

from src.conditions import Category


# ---------------------------------------------------------------------------
# Background gradients
# ---------------------------------------------------------------------------

DEFAULT_GRADIENT = "linear-gradient(135deg, #3b82f6 0%, #a855f7 50%, #ec4899 100%)"

_WEATHER_GRADIENTS: dict[Category, str] = {
    Category.RAIN: "linear-gradient(135deg, #374151 0%, #1f2937 50%, #111827 100%)",
    Category.CLEAR: "linear-gradient(135deg, #facc15 0%, #f97316 50%, #ef4444 100%)",
    Category.CLOUDY: "linear-gradient(135deg, #9ca3af 0%, #4b5563 50%, #3b82f6 100%)",
    Category.SNOW: "linear-gradient(135deg, #dbeafe 0%, #93c5fd 50%, #3b82f6 100%)",
    Category.FOG: "linear-gradient(135deg, #d1d5db 0%, #9ca3af 50%, #6b7280 100%)",
    Category.STORM: "linear-gradient(135deg, #111827 0%, #581c87 50%, #111827 100%)",
}


def select_theme(category: Category) -> str:
    """Choose the page background gradient for a category."""
    return _WEATHER_GRADIENTS.get(category, DEFAULT_GRADIENT)


# ---------------------------------------------------------------------------
# Header tint
# ---------------------------------------------------------------------------

HEADER_TRANSPARENT = "transparent"
HEADER_DEFAULT = "rgba(255, 255, 255, 0.10)"

_HEADER_TINTS: dict[Category, str] = {
    Category.RAIN: "rgba(31, 41, 55, 0.30)",      # gray-800
    Category.CLEAR: "rgba(249, 115, 22, 0.30)",   # orange-500
    Category.CLOUDY: "rgba(75, 85, 99, 0.30)",    # gray-600
    Category.SNOW: "rgba(147, 197, 253, 0.30)",   # blue-300
    Category.FOG: "rgba(156, 163, 175, 0.30)",    # gray-400
    Category.STORM: "rgba(17, 24, 39, 0.30)",     # gray-900
}


def select_header_theme(category: Category | None, scrolled: bool) -> str:
    """Choose the header background.

    Until the page is scrolled, or while no weather is loaded, the header
    stays transparent whatever the category.
    """
    if category is None or not scrolled:
        return HEADER_TRANSPARENT
    return _HEADER_TINTS.get(category, HEADER_DEFAULT)


# ---------------------------------------------------------------------------
# Icons
# ---------------------------------------------------------------------------

DEFAULT_ICON = "\U0001f321\ufe0f"

_CONDITION_ICONS: dict[Category, str] = {
    Category.CLEAR: "\u2600\ufe0f",
    Category.RAIN: "\U0001f327\ufe0f",
    Category.CLOUDY: "\u2601\ufe0f",
    Category.STORM: "\u26c8\ufe0f",
    Category.SNOW: "\u2744\ufe0f",
    Category.FOG: "\U0001f32b\ufe0f",
    Category.WINDY: "\U0001f4a8",
}


def select_icon(category: Category) -> str:
    """Map a category to a weather emoji."""
    return _CONDITION_ICONS.get(category, DEFAULT_ICON)


# ---------------------------------------------------------------------------
# Decorative animations
# ---------------------------------------------------------------------------

_RAIN_ANIMATION = """
@keyframes wx-rain {
    0% { background-position: 0% 0%; }
    100% { background-position: 20% 100%; }
}
.stApp {
    background-image: linear-gradient(to bottom, transparent 0%, rgba(0,0,0,0.4) 100%),
        url("data:image/svg+xml,%3Csvg width='12' height='12' viewBox='0 0 12 12' xmlns='http://www.w3.org/2000/svg'%3E%3Cpath d='M4 0h1v6H4zm7 6h1v6h-1z' fill='%23FFFFFF' fill-opacity='0.3'/%3E%3C/svg%3E"),
        var(--wx-gradient) !important;
    animation: wx-rain 3s linear infinite;
}
"""

_STORM_ANIMATION = """
@keyframes wx-thunder {
    0% { opacity: 1; }
    20% { opacity: 0.8; }
    22% { opacity: 1; }
    24% { opacity: 0.8; }
    26% { opacity: 1; }
    100% { opacity: 1; }
}
.stApp { animation: wx-thunder 5s ease infinite; }
"""

_ANIMATIONS: dict[Category, str] = {
    Category.RAIN: _RAIN_ANIMATION,
    Category.STORM: _STORM_ANIMATION,
}


def select_animation(category: Category) -> str | None:
    """Return keyframe CSS for animated backgrounds, or None for static ones."""
    return _ANIMATIONS.get(category)
