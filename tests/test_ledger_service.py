"""
Tests for the entity store: salespersons, sales entries and individual
sales, including ordering, range filtering and cascading deletes.
"""

import pytest
from datetime import date, datetime
from decimal import Decimal

from salesbook.errors import Conflict, NotFound
from salesbook.models import db, Salesperson, SalesEntry, IndividualSale
from salesbook.schemas import (
    SalespersonCreate, SalesEntryCreate, IndividualSaleCreate, validate,
)
from salesbook.services import ledger_service


def make_entry(salesperson_id, entry_date='2024-01-15', **overrides):
    payload = {
        'date': entry_date,
        'salesperson_id': salesperson_id,
        'cash_collected': '100',
        'digital_collected': '50',
        'expenses': '25',
    }
    payload.update(overrides)
    return ledger_service.create_sales_entry(validate(SalesEntryCreate, payload))


class TestSalespersons:
    """Tests for salesperson registration and listing."""

    def test_create_salesperson(self, fresh_app):
        salesperson = ledger_service.create_salesperson(
            validate(SalespersonCreate, {'name': 'Dana White', 'email': 'dana@company.com'})
        )
        assert salesperson.id is not None
        assert db.session.get(Salesperson, salesperson.id).name == 'Dana White'

    def test_list_is_alphabetical(self, fresh_app):
        for name in ['Zed', 'amy', 'Mona']:
            ledger_service.create_salesperson(validate(SalespersonCreate, {'name': name}))

        names = [s.name for s in ledger_service.list_salespersons()]
        assert names == sorted(names)

    def test_seed_only_when_empty(self, fresh_app):
        roster = fresh_app.config['DEFAULT_SALESPERSONS']

        created = ledger_service.seed_salespersons(roster)
        assert len(created) == len(roster)

        assert ledger_service.seed_salespersons(roster) == []
        assert Salesperson.query.count() == len(roster)

    def test_seed_skipped_when_salespersons_exist(self, init_database):
        assert ledger_service.seed_salespersons([{'name': 'Extra'}]) == []
        assert Salesperson.query.filter_by(name='Extra').first() is None

    def test_clear_refused_while_entries_exist(self, init_database):
        with pytest.raises(Conflict):
            ledger_service.clear_salespersons()
        assert Salesperson.query.count() == 3

    def test_clear_salespersons(self, fresh_app):
        ledger_service.seed_salespersons(fresh_app.config['DEFAULT_SALESPERSONS'])
        removed = ledger_service.clear_salespersons()
        assert removed == len(fresh_app.config['DEFAULT_SALESPERSONS'])
        assert Salesperson.query.count() == 0

    def test_get_missing_salesperson(self, fresh_app):
        with pytest.raises(NotFound) as exc_info:
            ledger_service.get_salesperson(999)
        assert exc_info.value.message == 'Salesperson 999 not found'


class TestSalesEntries:
    """Tests for recording and listing entries."""

    def test_create_entry(self, init_database):
        entry = make_entry(init_database['carol'], notes='Evening')

        stored = db.session.get(SalesEntry, entry.id)
        assert stored.cash_collected == Decimal('100.00')
        assert stored.net_amount == Decimal('125.00')
        assert stored.notes == 'Evening'
        assert stored.created_at is not None

    def test_entry_requires_existing_salesperson(self, fresh_app):
        with pytest.raises(NotFound):
            make_entry(42)
        assert SalesEntry.query.count() == 0

    def test_multiple_entries_same_day_accumulate(self, init_database):
        make_entry(init_database['carol'])
        make_entry(init_database['carol'])

        entries = SalesEntry.query.filter_by(
            salesperson_id=init_database['carol'], date=date(2024, 1, 15)
        ).all()
        assert len(entries) == 2

    def test_entry_with_individual_sales(self, init_database):
        entry = make_entry(init_database['carol'], individual_sales=[
            {'customer_name': 'Ravi', 'amount': '60', 'payment_method': 'cash'},
            {'customer_name': 'Meena', 'amount': '40', 'payment_method': 'digital'},
        ])
        sales = ledger_service.list_individual_sales(entry.id)
        assert {s.customer_name for s in sales} == {'Ravi', 'Meena'}

    def test_entry_and_sales_roll_back_together(self, init_database, monkeypatch):
        """A failure while writing line items leaves no entry behind"""
        count_before = SalesEntry.query.count()

        original_add = db.session.add

        def failing_add(instance):
            if isinstance(instance, IndividualSale):
                raise RuntimeError('disk full')
            return original_add(instance)

        monkeypatch.setattr(db.session, 'add', failing_add)

        with pytest.raises(RuntimeError):
            make_entry(init_database['carol'], individual_sales=[
                {'customer_name': 'Ravi', 'amount': '60', 'payment_method': 'cash'},
            ])

        monkeypatch.undo()
        assert SalesEntry.query.count() == count_before
        assert IndividualSale.query.count() == 0

    def test_list_by_date_most_recent_first(self, init_database):
        entries = ledger_service.list_sales_entries_by_date(date(2024, 1, 15))

        assert len(entries) == 3
        created = [e.created_at for e in entries]
        assert created == sorted(created, reverse=True)
        assert all(e.salesperson is not None for e in entries)

    def test_list_by_date_empty(self, init_database):
        assert ledger_service.list_sales_entries_by_date(date(2023, 12, 31)) == []


class TestDateRangeQueries:
    """Tests for inclusive range queries."""

    @pytest.fixture
    def january(self, fresh_app):
        alice = Salesperson(name='Alice')
        bob = Salesperson(name='Bob')
        db.session.add_all([alice, bob])
        db.session.flush()

        rows = [
            (date(2023, 12, 31), alice, datetime(2023, 12, 31, 9)),
            (date(2024, 1, 1), alice, datetime(2024, 1, 1, 9)),
            (date(2024, 1, 1), bob, datetime(2024, 1, 1, 11)),
            (date(2024, 1, 15), bob, datetime(2024, 1, 15, 8)),
            (date(2024, 1, 15), alice, datetime(2024, 1, 15, 18)),
            (date(2024, 1, 31), alice, datetime(2024, 1, 31, 7)),
            (date(2024, 2, 1), bob, datetime(2024, 2, 1, 7)),
        ]
        for entry_date, salesperson, created_at in rows:
            db.session.add(SalesEntry(
                date=entry_date,
                salesperson_id=salesperson.id,
                cash_collected=Decimal('10'),
                digital_collected=Decimal('0'),
                expenses=Decimal('0'),
                created_at=created_at
            ))
        db.session.commit()
        return {'alice': alice.id, 'bob': bob.id}

    def test_range_is_inclusive_and_ordered(self, january):
        entries = ledger_service.list_sales_entries_in_range(date(2024, 1, 1), date(2024, 1, 31))

        assert [(e.date, e.created_at) for e in entries] == [
            (date(2024, 1, 31), datetime(2024, 1, 31, 7)),
            (date(2024, 1, 15), datetime(2024, 1, 15, 18)),
            (date(2024, 1, 15), datetime(2024, 1, 15, 8)),
            (date(2024, 1, 1), datetime(2024, 1, 1, 11)),
            (date(2024, 1, 1), datetime(2024, 1, 1, 9)),
        ]

    def test_range_filtered_by_salesperson(self, january):
        all_entries = ledger_service.list_sales_entries_in_range(date(2024, 1, 1), date(2024, 1, 31))
        alice_entries = ledger_service.list_sales_entries_in_range(
            date(2024, 1, 1), date(2024, 1, 31), january['alice']
        )

        assert all(e.salesperson_id == january['alice'] for e in alice_entries)
        assert [e.id for e in alice_entries] == [
            e.id for e in all_entries if e.salesperson_id == january['alice']
        ]

    def test_single_day_range(self, january):
        entries = ledger_service.list_sales_entries_in_range(date(2024, 2, 1), date(2024, 2, 1))
        assert len(entries) == 1


class TestDeletion:
    """Tests for deleting entries and their individual sales."""

    def test_delete_removes_individual_sales(self, init_database):
        entry_id = init_database['entries'][0]
        for name in ['Ravi', 'Meena']:
            ledger_service.create_individual_sale(validate(IndividualSaleCreate, {
                'sales_entry_id': entry_id,
                'customer_name': name,
                'amount': '10',
                'payment_method': 'cash',
            }))
        assert len(ledger_service.list_individual_sales(entry_id)) == 2

        ledger_service.delete_sales_entry(entry_id)

        assert ledger_service.list_individual_sales(entry_id) == []
        assert IndividualSale.query.count() == 0
        with pytest.raises(NotFound):
            ledger_service.get_sales_entry(entry_id)

    def test_delete_leaves_other_entries(self, init_database):
        ledger_service.delete_sales_entry(init_database['entries'][0])
        assert SalesEntry.query.count() == 3

    def test_delete_missing_entry(self, init_database):
        with pytest.raises(NotFound):
            ledger_service.delete_sales_entry(999)


class TestIndividualSales:
    """Tests for customer line items."""

    def test_requires_existing_entry(self, init_database):
        with pytest.raises(NotFound) as exc_info:
            ledger_service.create_individual_sale(validate(IndividualSaleCreate, {
                'sales_entry_id': 999,
                'customer_name': 'Ravi',
                'amount': '10',
                'payment_method': 'cash',
            }))
        assert exc_info.value.message == 'Sales entry 999 not found'

    def test_list_most_recent_first(self, init_database):
        entry_id = init_database['entries'][1]
        first = ledger_service.create_individual_sale(validate(IndividualSaleCreate, {
            'sales_entry_id': entry_id, 'customer_name': 'First',
            'amount': '1', 'payment_method': 'cash',
        }))
        second = ledger_service.create_individual_sale(validate(IndividualSaleCreate, {
            'sales_entry_id': entry_id, 'customer_name': 'Second',
            'amount': '2', 'payment_method': 'digital',
        }))

        sales = ledger_service.list_individual_sales(entry_id)
        assert [s.id for s in sales] == [second.id, first.id]

    def test_unknown_entry_lists_nothing(self, fresh_app):
        assert ledger_service.list_individual_sales(12345) == []
