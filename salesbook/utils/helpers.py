"""
Helper Utilities
Common utility functions used across the application
"""

from datetime import timedelta
from decimal import Decimal, ROUND_HALF_UP

CENT = Decimal('0.01')


def to_decimal(value):
    """
    Coerce a stored or aggregated amount to a two-place Decimal

    SQLite hands SUM() results back as floats, so they go through str()
    before becoming a Decimal.

    Args:
        value: Decimal, int, float, str or None

    Returns:
        Decimal: Amount quantized to cents (None becomes 0.00)
    """
    if value is None:
        return Decimal('0.00')
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def money(value):
    """Render an amount as a fixed two-place string, e.g. '800.00'"""
    return str(to_decimal(value))


def format_currency(amount, currency_symbol='₹'):
    """
    Format amount as currency

    Args:
        amount: Numeric amount
        currency_symbol: Currency symbol

    Returns:
        str: Formatted currency string
    """
    return f"{currency_symbol} {to_decimal(amount):,.2f}"


def format_date(dt, format_str='%Y-%m-%d'):
    """Format a date object"""
    if dt:
        if isinstance(dt, str):
            return dt
        return dt.strftime(format_str)
    return None


def format_datetime(dt):
    """Format a datetime as ISO 8601"""
    if dt:
        return dt.isoformat()
    return None


def get_date_range(period, as_of_date):
    """
    Get date range for reporting

    Args:
        period: today, yesterday, this_week, last_week, this_month, last_month
        as_of_date: The date the period is relative to

    Returns:
        tuple: (start_date, end_date)
    """
    if period == 'today':
        return as_of_date, as_of_date

    elif period == 'yesterday':
        yesterday = as_of_date - timedelta(days=1)
        return yesterday, yesterday

    elif period == 'this_week':
        start = as_of_date - timedelta(days=as_of_date.weekday())
        return start, as_of_date

    elif period == 'last_week':
        start = as_of_date - timedelta(days=as_of_date.weekday() + 7)
        end = start + timedelta(days=6)
        return start, end

    elif period == 'this_month':
        start = as_of_date.replace(day=1)
        return start, as_of_date

    elif period == 'last_month':
        last_month = as_of_date.replace(day=1) - timedelta(days=1)
        start = last_month.replace(day=1)
        return start, last_month

    raise ValueError(f"Unknown period '{period}'")


def serialize(value):
    """
    Make service results JSON friendly

    Decimals become two-place strings, dates ISO strings, models their
    to_dict(). Dicts and lists are walked recursively.
    """
    if isinstance(value, Decimal):
        return money(value)
    if isinstance(value, dict):
        return {key: serialize(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [serialize(item) for item in value]
    if hasattr(value, 'to_dict'):
        return value.to_dict()
    if hasattr(value, 'isoformat'):
        return value.isoformat()
    return value
