"""
Tests for the once-per-date reconciliation record.
"""

from datetime import date
from decimal import Decimal

from salesbook.models import DailySummary
from salesbook.services import reconciliation_service


class TestClosingBalance:
    """Tests for the derived closing balance."""

    def test_formula(self):
        closing = reconciliation_service.compute_closing_balance(
            Decimal('1000.00'), Decimal('500.00'), Decimal('300.00')
        )
        assert closing == Decimal('800.00')

    def test_negative_closing_allowed(self):
        closing = reconciliation_service.compute_closing_balance(
            Decimal('0.00'), Decimal('100.00'), Decimal('20.00')
        )
        assert closing == Decimal('-80.00')


class TestDailySummary:
    """Tests for saving and reading daily summaries."""

    def test_absent_before_first_save(self, fresh_app):
        assert reconciliation_service.get_daily_summary(date(2024, 1, 15)) is None

    def test_save_computes_closing_balance(self, fresh_app):
        summary = reconciliation_service.save_daily_summary(
            date(2024, 1, 15), Decimal('1000.00'), Decimal('500.00'), Decimal('300.00')
        )

        assert summary.date == date(2024, 1, 15)
        assert summary.closing_balance == Decimal('800.00')
        assert summary.to_dict()['closing_balance'] == '800.00'

    def test_save_overwrites_existing_date(self, fresh_app):
        day = date(2024, 1, 15)
        first = reconciliation_service.save_daily_summary(
            day, Decimal('1000.00'), Decimal('500.00'), Decimal('300.00')
        )
        first_id = first.id

        second = reconciliation_service.save_daily_summary(
            day, Decimal('2000.00'), Decimal('100.00'), Decimal('50.00')
        )

        assert DailySummary.query.filter_by(date=day).count() == 1
        assert second.id == first_id
        assert second.opening_cash == Decimal('2000.00')
        assert second.closing_balance == Decimal('1950.00')

    def test_dates_are_independent(self, fresh_app):
        reconciliation_service.save_daily_summary(
            date(2024, 1, 15), Decimal('10'), Decimal('0'), Decimal('0')
        )
        reconciliation_service.save_daily_summary(
            date(2024, 1, 16), Decimal('20'), Decimal('0'), Decimal('0')
        )

        assert DailySummary.query.count() == 2
        assert reconciliation_service.get_daily_summary(date(2024, 1, 16)).opening_cash == Decimal('20.00')

    def test_negative_closing_is_stored(self, fresh_app):
        summary = reconciliation_service.save_daily_summary(
            date(2024, 1, 15), Decimal('0'), Decimal('100'), Decimal('20')
        )
        assert summary.closing_balance == Decimal('-80.00')

    def test_independent_of_sales_entries(self, init_database):
        summary = reconciliation_service.save_daily_summary(
            date(2024, 1, 15), Decimal('100'), Decimal('0'), Decimal('0')
        )
        assert summary.total_collection == Decimal('0.00')
        assert summary.closing_balance == Decimal('100.00')
