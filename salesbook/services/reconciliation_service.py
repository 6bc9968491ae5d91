"""
Reconciliation Service
Handles the once-per-date cash ledger and its derived closing balance
"""

import logging
from datetime import datetime

from sqlalchemy.dialects import postgresql, sqlite

from salesbook.models import db, DailySummary
from salesbook.utils.db_utils import atomic

logger = logging.getLogger(__name__)

# Dialects that support INSERT ... ON CONFLICT DO UPDATE
UPSERT_DIALECTS = {
    'sqlite': sqlite.insert,
    'postgresql': postgresql.insert,
}


def compute_closing_balance(opening_cash, total_sales, total_collection):
    """Closing = opening cash + total collection - total sales (may be negative)"""
    return opening_cash + total_collection - total_sales


def get_daily_summary(as_of_date):
    """
    Reconciliation record for a date.

    Returns:
        DailySummary or None when nothing has been entered for that date yet
    """
    return DailySummary.query.filter(DailySummary.date == as_of_date).first()


def save_daily_summary(as_of_date, opening_cash, total_sales, total_collection):
    """
    Insert or overwrite the reconciliation record for a date.

    The write is a single conditional statement keyed by the unique date,
    so concurrent submissions for the same day never produce two rows.

    Args:
        as_of_date: Calendar date of the record
        opening_cash: Cash in the drawer at opening
        total_sales: Total sales for the day
        total_collection: Total collected for the day

    Returns:
        DailySummary: The stored record
    """
    closing_balance = compute_closing_balance(opening_cash, total_sales, total_collection)
    now = datetime.utcnow()

    values = {
        'opening_cash': opening_cash,
        'total_sales': total_sales,
        'total_collection': total_collection,
        'closing_balance': closing_balance,
        'updated_at': now,
    }

    dialect = db.session.get_bind().dialect.name
    insert = UPSERT_DIALECTS.get(dialect)

    with atomic():
        if insert is not None:
            stmt = insert(DailySummary).values(date=as_of_date, created_at=now, **values)
            stmt = stmt.on_conflict_do_update(index_elements=['date'], set_=values)
            db.session.execute(stmt)
        else:
            summary = DailySummary.query.filter(
                DailySummary.date == as_of_date
            ).with_for_update().first()
            if summary is None:
                summary = DailySummary(date=as_of_date, created_at=now)
                db.session.add(summary)
            for key, value in values.items():
                setattr(summary, key, value)

    logger.info(f"Daily summary saved for {as_of_date}: closing balance {closing_balance}")
    return get_daily_summary(as_of_date)


def save_daily_summary_from(data):
    """Convenience wrapper taking a validated DailySummaryCreate"""
    return save_daily_summary(data.date, data.opening_cash, data.total_sales, data.total_collection)
