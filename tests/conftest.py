"""
Shared pytest fixtures and configuration for all tests.

Provides common fixtures for Flask application testing, database sessions
and test data initialization.
"""

import pytest
import sys
import os
from decimal import Decimal
from datetime import date, datetime

# Add the project root to the path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from salesbook import create_app
from salesbook.models import db


@pytest.fixture(scope='session')
def app_factory():
    """Factory fixture for creating test app instances."""
    def _create_app(config='testing'):
        app = create_app(config)
        app.config['WTF_CSRF_ENABLED'] = False
        app.config['TESTING'] = True
        app.config['SQLALCHEMY_DATABASE_URI'] = 'sqlite:///:memory:'
        return app
    return _create_app


@pytest.fixture(scope='function')
def fresh_app(app_factory):
    """Create a fresh application for each test with clean database."""
    app = app_factory()

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope='function')
def client(fresh_app):
    """Create a test client for each test."""
    return fresh_app.test_client()


@pytest.fixture(scope='function')
def db_session(fresh_app):
    """Provide a database session for testing."""
    yield db.session
    db.session.rollback()


@pytest.fixture(scope='function')
def init_database(fresh_app):
    """
    Initialize database with test data.

    Creates:
    - Salespersons (Alice, Bob, Carol)
    - Two entries for Alice and one for Bob on 2024-01-15
    - One entry for Alice on 2024-01-10

    Yields a dict of the created ids.
    """
    from salesbook.models import Salesperson, SalesEntry

    alice = Salesperson(name='Alice Johnson', email='alice@company.com')
    bob = Salesperson(name='Bob Smith', email='bob@company.com')
    carol = Salesperson(name='Carol Davis')
    db.session.add_all([alice, bob, carol])
    db.session.flush()

    entries = [
        SalesEntry(
            date=date(2024, 1, 15),
            salesperson_id=alice.id,
            cash_collected=Decimal('1000.00'),
            digital_collected=Decimal('500.00'),
            expenses=Decimal('200.00'),
            notes='Morning shift',
            created_at=datetime(2024, 1, 15, 9, 0)
        ),
        SalesEntry(
            date=date(2024, 1, 15),
            salesperson_id=alice.id,
            cash_collected=Decimal('250.50'),
            digital_collected=Decimal('0.00'),
            expenses=Decimal('50.25'),
            created_at=datetime(2024, 1, 15, 17, 30)
        ),
        SalesEntry(
            date=date(2024, 1, 15),
            salesperson_id=bob.id,
            cash_collected=Decimal('300.00'),
            digital_collected=Decimal('700.00'),
            expenses=Decimal('0.00'),
            created_at=datetime(2024, 1, 15, 12, 0)
        ),
        SalesEntry(
            date=date(2024, 1, 10),
            salesperson_id=alice.id,
            cash_collected=Decimal('100.00'),
            digital_collected=Decimal('100.00'),
            expenses=Decimal('10.00'),
            created_at=datetime(2024, 1, 10, 10, 0)
        ),
    ]
    db.session.add_all(entries)
    db.session.commit()

    yield {
        'alice': alice.id,
        'bob': bob.id,
        'carol': carol.id,
        'entries': [entry.id for entry in entries],
    }

    # Cleanup is handled by fresh_app fixture


# Pytest configuration
def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "api: marks tests as API endpoint tests"
    )


def pytest_collection_modifyitems(config, items):
    """Automatically add markers based on test module names."""
    for item in items:
        if 'routes' in item.nodeid or 'api' in item.nodeid.lower():
            item.add_marker(pytest.mark.api)
