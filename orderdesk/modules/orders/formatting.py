"""
Display formatting for stored order fields.
"""

from datetime import datetime

INVALID_DATE = 'Invalid Date'


def _parse_timestamp(value):
    """Turn a stored timestamp (datetime, ISO string or epoch millis) into a datetime"""
    if isinstance(value, datetime):
        return value
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith('Z'):
            text = text[:-1] + '+00:00'
        try:
            return datetime.fromisoformat(text)
        except ValueError:
            return None
    return None


def format_date(value):
    """
    Format an order timestamp as e.g. "Mar 5, 2024, 02:30 PM".

    Timezone-aware values (Firestore timestamps are UTC) are shown in local time.
    Unparseable or missing values give "Invalid Date".
    """
    moment = _parse_timestamp(value)
    if moment is None:
        return INVALID_DATE
    if moment.tzinfo is not None:
        moment = moment.astimezone()
    return f"{moment:%b} {moment.day}, {moment.year}, {moment:%I:%M %p}"


def format_amount(value):
    """Render a stored number the way it was stored: 250 -> "250", 99.5 -> "99.5" """
    if value is None:
        return ''
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_money(value, currency):
    return f"{format_amount(value)} {currency}"


def format_line_total(item, currency):
    """Cart line total (price * quantity) with exactly two decimals"""
    return f"{item.line_total:.2f} {currency}"


def format_export_date(today=None):
    """ISO date used in export file names"""
    today = today or datetime.now()
    return today.strftime('%Y-%m-%d')
