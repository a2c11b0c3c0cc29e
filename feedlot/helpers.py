# feedlot/helpers.py
from datetime import datetime

from flask import current_app


def local_today():
    """Today's date in the configured feedlot timezone."""
    tz = current_app.config.get('LOCAL_TZ')
    return datetime.now(tz).date() if tz else datetime.now().date()


def format_currency(value) -> str:
    """Format a dollar amount, e.g. 1234.5 -> '$1,234.50'."""
    amount = float(value or 0)
    sign = '-' if amount < 0 else ''
    return f"{sign}${abs(amount):,.2f}"
