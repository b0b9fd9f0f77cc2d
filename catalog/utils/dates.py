"""
Date formatting helpers used by the models' computed fields.

Two formats are needed:
- long display format: "June 8th, 1949"
- form input format: "1949-06-08" (what <input type="date"> expects)
"""

from datetime import date


def ordinal(day: int) -> str:
    """Return the day of month with its English ordinal suffix (1st, 2nd, 11th)."""
    if 11 <= day % 100 <= 13:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")
    return f"{day}{suffix}"


def format_long(value: date | None, missing: str = "unknown") -> str:
    """Format a date as "Month Dth, YYYY", or return `missing` when absent."""
    if value is None:
        return missing
    return f"{value.strftime('%B')} {ordinal(value.day)}, {value.year}"


def format_form(value: date | None) -> str:
    """Format a date as YYYY-MM-DD for form inputs, empty when absent."""
    if value is None:
        return ""
    return value.isoformat()
