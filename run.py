"""
Application Entry Point
Initializes and runs the Flask application and its management commands
"""

import os
import logging
from datetime import date

import click

from salesbook import create_app, db

# Determine configuration environment
config_name = os.environ.get('FLASK_ENV', 'development')
app = create_app(config_name)

# Setup logging
if not os.path.exists(app.config['LOG_FOLDER']):
    os.makedirs(app.config['LOG_FOLDER'])

logging.basicConfig(
    level=getattr(logging, app.config['LOG_LEVEL']),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.FileHandler(os.path.join(app.config['LOG_FOLDER'], 'app.log')),
        logging.StreamHandler()
    ]
)

logger = logging.getLogger(__name__)


@app.shell_context_processor
def make_shell_context():
    """Make database and models available in Flask shell"""
    from salesbook import models
    return {
        'db': db,
        'Salesperson': models.Salesperson,
        'SalesEntry': models.SalesEntry,
        'IndividualSale': models.IndividualSale,
        'DailySummary': models.DailySummary
    }


@app.cli.command('init-db')
def init_db():
    """Initialize the database with tables and the default roster"""
    from salesbook.services.ledger_service import seed_salespersons
    from salesbook.utils.db_utils import init_database

    logger.info("Initializing database...")
    init_database()
    created = seed_salespersons(app.config['DEFAULT_SALESPERSONS'])
    logger.info(f"Database initialized successfully! ({len(created)} salespersons seeded)")


@app.cli.command('seed-salespersons')
def seed_salespersons_command():
    """Insert the default roster when no salesperson exists"""
    from salesbook.services.ledger_service import seed_salespersons
    created = seed_salespersons(app.config['DEFAULT_SALESPERSONS'])
    if created:
        logger.info(f"{len(created)} default salespersons added")
    else:
        logger.info("Salespersons already exist, nothing seeded")


@app.cli.command('clear-salespersons')
@click.confirmation_option(prompt='Delete every salesperson?')
def clear_salespersons_command():
    """Delete all salespersons (refused while sales entries exist)"""
    from salesbook.errors import Conflict
    from salesbook.services.ledger_service import clear_salespersons
    try:
        removed = clear_salespersons()
    except Conflict as e:
        raise click.ClickException(e.message)
    logger.info(f"{removed} salespersons removed")


@app.cli.command('daily-report')
@click.argument('report_date', required=False)
def daily_report(report_date):
    """Print the totals and reconciliation record of a date (YYYY-MM-DD)"""
    from salesbook.services import aggregation_service, reconciliation_service
    from salesbook.utils.helpers import format_currency

    as_of_date = date.fromisoformat(report_date) if report_date else date.today()
    symbol = app.config['CURRENCY_SYMBOL']

    totals = aggregation_service.daily_totals(as_of_date)
    click.echo(f"Daily report for {as_of_date}")
    click.echo(f"  Cash:     {format_currency(totals['cash'], symbol)}")
    click.echo(f"  Digital:  {format_currency(totals['digital'], symbol)}")
    click.echo(f"  Expenses: {format_currency(totals['expenses'], symbol)}")
    click.echo(f"  Net:      {format_currency(totals['net'], symbol)}")

    for row in aggregation_service.per_salesperson_totals(as_of_date):
        click.echo(f"  - {row['salesperson'].name}: net {format_currency(row['net'], symbol)}")

    summary = reconciliation_service.get_daily_summary(as_of_date)
    if summary is None:
        click.echo("  No reconciliation entered for this date")
    else:
        click.echo(f"  Opening cash:    {format_currency(summary.opening_cash, symbol)}")
        click.echo(f"  Closing balance: {format_currency(summary.closing_balance, symbol)}")


if __name__ == '__main__':
    is_dev = config_name == 'development'

    with app.app_context():
        # Create tables if they don't exist
        db.create_all()
        logger.info("Database tables created")

    logger.info(f"Starting {app.config['BUSINESS_NAME']}...")
    app.run(
        host='0.0.0.0',
        port=int(os.environ.get('PORT', 5001)),
        debug=is_dev
    )
