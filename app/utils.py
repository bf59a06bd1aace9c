"""Formatting helpers shared by the controllers."""

from __future__ import annotations

from datetime import date
from typing import Iterable


def parse_release_date(value: str | None) -> date | None:
    """Parse an ISO ``YYYY-MM-DD`` catalog date, tolerating junk."""

    if not value:
        return None
    text = value.strip()
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def release_year(value: str | None) -> int | None:
    parsed = parse_release_date(value)
    if parsed is not None:
        return parsed.year
    # Partial dates such as "1999" still carry a usable year.
    if value and len(value) >= 4 and value[:4].isdigit():
        return int(value[:4])
    return None


def display_year(*candidates: str | None) -> str:
    """Return the year of the first usable date, or ``"Unknown"``."""

    for candidate in candidates:
        if not candidate:
            continue
        year = release_year(candidate)
        if year is not None:
            return str(year)
    return "Unknown"


def format_rating(value: float | None) -> str:
    """Ratings render with one decimal; zero and missing become ``N/A``."""

    if not value:
        return "N/A"
    return f"{value:.1f}"


def format_runtime(minutes: int | None) -> str:
    if not minutes:
        return "Unknown"
    return f"{minutes} minutes"


def join_names(names: Iterable[str]) -> str:
    return ", ".join(name for name in names if name)


def build_image_url(path: str | None, base_url: str) -> str | None:
    if not path:
        return None
    if path.startswith("http"):
        return path
    return f"{base_url}{path}"
