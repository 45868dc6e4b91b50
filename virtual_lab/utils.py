from datetime import date, datetime


def round_half_up(numerator: int, denominator: int) -> int:
    """Nearest integer to numerator / denominator, halves rounded up."""
    return (2 * numerator + denominator) // (2 * denominator)


def format_duration(minutes) -> str:
    """45 -> '45 min', 90 -> '1h 30min', 120 -> '2h'."""
    minutes = int(minutes or 0)
    if minutes < 60:
        return f"{minutes} min"
    hours, rest = divmod(minutes, 60)
    return f"{hours}h {rest}min" if rest else f"{hours}h"


def format_date(value) -> str:
    """Short US-style date, e.g. 'Jan 5, 2025'. Accepts ISO strings."""
    if value is None:
        return ""
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if not isinstance(value, (date, datetime)):
        raise TypeError(f"Cannot format {type(value).__name__} as a date")
    return f"{value.strftime('%b')} {value.day}, {value.year}"
