"""Constants for resume content resolution, rendering and generation."""

from __future__ import annotations

# Deepest recursion level the unwrapper will parse before giving up and
# returning the current value as-is.
MAX_UNWRAP_DEPTH = 5

# Lower-cased substrings that mark a string as a full HTML document.
HTML_MARKERS: tuple[str, ...] = ("<!doctype html>", "<html>", "<html ")

# Opening character -> required closing character for the JSON heuristic.
JSON_DELIMITERS: dict[str, str] = {
    "{": "}",
    "[": "]",
    '"': '"',
}

DEFAULT_FETCH_MAX_ATTEMPTS = 3
DEFAULT_FETCH_BACKOFF_SECONDS = 1.0

DEFAULT_TEMPLATE = "classic"

PRESENT_LABEL = "Present"
DATE_RANGE_SEPARATOR = " - "

MONTH_ABBR = [
    "",
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
]
