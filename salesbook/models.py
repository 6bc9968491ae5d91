"""
Database Models
SQLAlchemy ORM models for the daily collections ledger
"""

from datetime import datetime
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import event
from sqlalchemy.engine import Engine

from salesbook.utils.helpers import money, format_date, format_datetime

db = SQLAlchemy()


@event.listens_for(Engine, 'connect')
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    """SQLite ignores foreign keys unless asked per connection"""
    import sqlite3
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute('PRAGMA foreign_keys=ON')
        cursor.close()


class Salesperson(db.Model):
    """Sales staff who submit daily collections"""
    __tablename__ = 'salespersons'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(128), nullable=False, index=True)
    email = db.Column(db.String(255))

    # Relationships
    sales_entries = db.relationship('SalesEntry', back_populates='salesperson', lazy='dynamic')

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'email': self.email,
        }

    def __repr__(self):
        return f'<Salesperson {self.name}>'


class SalesEntry(db.Model):
    """One submission of a salesperson's collections for a calendar date"""
    __tablename__ = 'sales_entries'

    id = db.Column(db.Integer, primary_key=True)
    date = db.Column(db.Date, nullable=False, index=True)
    salesperson_id = db.Column(db.Integer, db.ForeignKey('salespersons.id'), nullable=False, index=True)

    # Amounts
    cash_collected = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    digital_collected = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    expenses = db.Column(db.Numeric(10, 2), nullable=False, default=0)

    notes = db.Column(db.Text)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    # Relationships
    salesperson = db.relationship('Salesperson', back_populates='sales_entries')
    individual_sales = db.relationship('IndividualSale', back_populates='sales_entry', lazy='dynamic')

    @property
    def net_amount(self):
        """Cash + digital - expenses, never stored"""
        return (self.cash_collected or 0) + (self.digital_collected or 0) - (self.expenses or 0)

    def to_dict(self, include_salesperson=True):
        data = {
            'id': self.id,
            'date': format_date(self.date),
            'salesperson_id': self.salesperson_id,
            'cash_collected': money(self.cash_collected),
            'digital_collected': money(self.digital_collected),
            'expenses': money(self.expenses),
            'net_amount': money(self.net_amount),
            'notes': self.notes,
            'created_at': format_datetime(self.created_at),
        }
        if include_salesperson:
            data['salesperson'] = self.salesperson.to_dict() if self.salesperson else None
        return data

    def __repr__(self):
        return f'<SalesEntry {self.id} {self.date}>'


class IndividualSale(db.Model):
    """Named customer payment that decomposes a sales entry"""
    __tablename__ = 'individual_sales'

    id = db.Column(db.Integer, primary_key=True)
    sales_entry_id = db.Column(db.Integer, db.ForeignKey('sales_entries.id'), nullable=False, index=True)
    customer_name = db.Column(db.String(255), nullable=False)
    amount = db.Column(db.Numeric(10, 2), nullable=False)
    payment_method = db.Column(db.String(32), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    # Relationship
    sales_entry = db.relationship('SalesEntry', back_populates='individual_sales')

    def to_dict(self):
        return {
            'id': self.id,
            'sales_entry_id': self.sales_entry_id,
            'customer_name': self.customer_name,
            'amount': money(self.amount),
            'payment_method': self.payment_method,
            'created_at': format_datetime(self.created_at),
        }

    def __repr__(self):
        return f'<IndividualSale {self.id} - {self.amount}>'


class DailySummary(db.Model):
    """Once-per-date reconciliation ledger"""
    __tablename__ = 'daily_summaries'

    id = db.Column(db.Integer, primary_key=True)
    date = db.Column(db.Date, nullable=False, unique=True, index=True)

    # Cash drawer
    opening_cash = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    total_sales = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    total_collection = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    closing_balance = db.Column(db.Numeric(10, 2), nullable=False, default=0)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'date': format_date(self.date),
            'opening_cash': money(self.opening_cash),
            'total_sales': money(self.total_sales),
            'total_collection': money(self.total_collection),
            'closing_balance': money(self.closing_balance),
            'created_at': format_datetime(self.created_at),
            'updated_at': format_datetime(self.updated_at),
        }

    def __repr__(self):
        return f'<DailySummary {self.date}>'
