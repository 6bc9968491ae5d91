"""
Ledger Service
Create, list and delete salespersons, sales entries and individual sales
"""

import logging

from sqlalchemy.orm import joinedload

from salesbook.errors import Conflict, NotFound
from salesbook.models import db, Salesperson, SalesEntry, IndividualSale
from salesbook.utils.db_utils import atomic

logger = logging.getLogger(__name__)


# ============================================================
# SALESPERSONS
# ============================================================

def list_salespersons():
    """All salespersons, alphabetical by name"""
    return Salesperson.query.order_by(Salesperson.name.asc(), Salesperson.id.asc()).all()


def get_salesperson(salesperson_id):
    salesperson = db.session.get(Salesperson, salesperson_id)
    if salesperson is None:
        raise NotFound('Salesperson', salesperson_id)
    return salesperson


def create_salesperson(data):
    """
    Register a salesperson.

    Args:
        data: Validated SalespersonCreate

    Returns:
        Salesperson: The persisted record
    """
    salesperson = Salesperson(name=data.name, email=data.email)
    with atomic():
        db.session.add(salesperson)
    logger.info(f"Salesperson {salesperson.id} ({salesperson.name}) created")
    return salesperson


def seed_salespersons(roster):
    """
    Insert the default roster, but only when no salesperson exists yet.

    Args:
        roster: List of {'name': ..., 'email': ...} dicts

    Returns:
        list: Salespersons created (empty when the table was already populated)
    """
    if Salesperson.query.first() is not None:
        return []

    created = [Salesperson(name=item['name'], email=item.get('email')) for item in roster]
    with atomic():
        db.session.add_all(created)
    logger.info(f"Seeded {len(created)} default salespersons")
    return created


def clear_salespersons():
    """
    Delete every salesperson.

    Refused while any sales entry still references a salesperson.

    Returns:
        int: Number of rows removed
    """
    if SalesEntry.query.first() is not None:
        raise Conflict('Cannot clear salespersons while sales entries exist')

    with atomic():
        removed = Salesperson.query.delete()
    logger.info(f"Cleared {removed} salespersons")
    return removed


# ============================================================
# SALES ENTRIES
# ============================================================

def get_sales_entry(entry_id):
    entry = db.session.get(SalesEntry, entry_id)
    if entry is None:
        raise NotFound('Sales entry', entry_id)
    return entry


def create_sales_entry(data):
    """
    Record one submission of collections.

    Individual sales supplied alongside the entry are written in the same
    transaction, so either the entry and all its line items persist or
    nothing does.

    Args:
        data: Validated SalesEntryCreate

    Returns:
        SalesEntry: The persisted entry
    """
    get_salesperson(data.salesperson_id)

    entry = SalesEntry(
        date=data.date,
        salesperson_id=data.salesperson_id,
        cash_collected=data.cash_collected,
        digital_collected=data.digital_collected,
        expenses=data.expenses,
        notes=data.notes
    )

    with atomic():
        db.session.add(entry)
        db.session.flush()  # Get the ID without committing

        for line in data.individual_sales:
            db.session.add(IndividualSale(
                sales_entry_id=entry.id,
                customer_name=line.customer_name,
                amount=line.amount,
                payment_method=line.payment_method
            ))

    logger.info(
        f"Sales entry {entry.id} created for salesperson {entry.salesperson_id} on {entry.date} "
        f"with {len(data.individual_sales)} individual sales"
    )
    return entry


def _entries_with_salesperson():
    return SalesEntry.query.options(joinedload(SalesEntry.salesperson))


def list_sales_entries_by_date(as_of_date):
    """Entries for one date, most recently created first"""
    return _entries_with_salesperson().filter(
        SalesEntry.date == as_of_date
    ).order_by(
        SalesEntry.created_at.desc(),
        SalesEntry.id.desc()
    ).all()


def list_sales_entries_in_range(from_date, to_date, salesperson_id=None):
    """
    Entries whose date falls within [from_date, to_date].

    Ordered most recent date first, then most recently created first
    within a date.

    Args:
        from_date: Inclusive lower bound
        to_date: Inclusive upper bound
        salesperson_id: Optional filter

    Returns:
        list: SalesEntry rows with their salesperson loaded
    """
    query = _entries_with_salesperson().filter(
        SalesEntry.date >= from_date,
        SalesEntry.date <= to_date
    )

    if salesperson_id:
        query = query.filter(SalesEntry.salesperson_id == salesperson_id)

    return query.order_by(
        SalesEntry.date.desc(),
        SalesEntry.created_at.desc(),
        SalesEntry.id.desc()
    ).all()


def delete_sales_entry(entry_id):
    """
    Delete an entry together with its individual sales.

    Children go first so the foreign key is never violated; both deletes
    share one transaction.
    """
    entry = get_sales_entry(entry_id)

    with atomic():
        removed_children = IndividualSale.query.filter(
            IndividualSale.sales_entry_id == entry.id
        ).delete(synchronize_session=False)
        db.session.delete(entry)

    logger.info(f"Sales entry {entry_id} deleted along with {removed_children} individual sales")


# ============================================================
# INDIVIDUAL SALES
# ============================================================

def create_individual_sale(data):
    """
    Add a customer line item to an existing entry.

    Args:
        data: Validated IndividualSaleCreate

    Returns:
        IndividualSale: The persisted line item
    """
    get_sales_entry(data.sales_entry_id)

    sale = IndividualSale(
        sales_entry_id=data.sales_entry_id,
        customer_name=data.customer_name,
        amount=data.amount,
        payment_method=data.payment_method
    )
    with atomic():
        db.session.add(sale)

    logger.info(f"Individual sale {sale.id} added to sales entry {sale.sales_entry_id}")
    return sale


def list_individual_sales(entry_id):
    """Line items of an entry, most recent first. Unknown entries yield []."""
    return IndividualSale.query.filter(
        IndividualSale.sales_entry_id == entry_id
    ).order_by(
        IndividualSale.created_at.desc(),
        IndividualSale.id.desc()
    ).all()
