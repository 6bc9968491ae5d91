"""
Aggregation Service
Daily, per-salesperson and period totals, recomputed from the entry rows
on every call

PostgreSQL returns SUM() over NUMERIC as an exact decimal. SQLite has no
decimal type and returns a float, which to_decimal() rounds back to cents.
"""

from sqlalchemy import func

from salesbook.models import db, Salesperson, SalesEntry
from salesbook.utils.helpers import to_decimal


def _sum_columns():
    return (
        func.coalesce(func.sum(SalesEntry.cash_collected), 0).label('cash'),
        func.coalesce(func.sum(SalesEntry.digital_collected), 0).label('digital'),
        func.coalesce(func.sum(SalesEntry.expenses), 0).label('expenses'),
        func.count(SalesEntry.id).label('entry_count'),
    )


def _totals(row):
    cash = to_decimal(row.cash)
    digital = to_decimal(row.digital)
    expenses = to_decimal(row.expenses)
    return {
        'cash': cash,
        'digital': digital,
        'expenses': expenses,
        'net': cash + digital - expenses,
        'entry_count': int(row.entry_count or 0),
    }


def daily_totals(as_of_date):
    """
    Sum collections and expenses across all entries for a date.

    A date without entries yields zero totals rather than an error.

    Returns:
        dict: {date, cash, digital, expenses, net, entry_count}
    """
    row = db.session.query(*_sum_columns()).filter(
        SalesEntry.date == as_of_date
    ).one()

    totals = _totals(row)
    totals['date'] = as_of_date
    return totals


def per_salesperson_totals(as_of_date):
    """
    Same sums as daily_totals, grouped by salesperson.

    Only salespersons with at least one entry on the date appear, ordered
    by name and then id.

    Returns:
        list: [{salesperson, cash, digital, expenses, net, entry_count}, ...]
    """
    rows = db.session.query(Salesperson, *_sum_columns()).join(
        SalesEntry, SalesEntry.salesperson_id == Salesperson.id
    ).filter(
        SalesEntry.date == as_of_date
    ).group_by(
        Salesperson.id, Salesperson.name, Salesperson.email
    ).order_by(
        Salesperson.name.asc(),
        Salesperson.id.asc()
    ).all()

    results = []
    for row in rows:
        totals = _totals(row)
        totals['salesperson'] = row.Salesperson
        results.append(totals)
    return results


def range_totals(from_date, to_date, salesperson_id=None):
    """
    Period summary over an inclusive date range.

    Returns:
        dict: {from_date, to_date, salesperson_id, cash, digital, expenses, net, entry_count}
    """
    query = db.session.query(*_sum_columns()).filter(
        SalesEntry.date >= from_date,
        SalesEntry.date <= to_date
    )
    if salesperson_id:
        query = query.filter(SalesEntry.salesperson_id == salesperson_id)

    totals = _totals(query.one())
    totals.update({
        'from_date': from_date,
        'to_date': to_date,
        'salesperson_id': salesperson_id,
    })
    return totals


def totals_by_date(from_date, to_date, salesperson_id=None):
    """
    Daily totals for every date in the range that has entries.

    Returns:
        list: [{date, cash, digital, expenses, net, entry_count}, ...] most recent date first
    """
    query = db.session.query(SalesEntry.date.label('date'), *_sum_columns()).filter(
        SalesEntry.date >= from_date,
        SalesEntry.date <= to_date
    )
    if salesperson_id:
        query = query.filter(SalesEntry.salesperson_id == salesperson_id)

    rows = query.group_by(SalesEntry.date).order_by(SalesEntry.date.desc()).all()

    results = []
    for row in rows:
        totals = _totals(row)
        totals['date'] = row.date
        results.append(totals)
    return results
