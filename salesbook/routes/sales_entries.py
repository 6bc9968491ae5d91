"""
Sales Entry Routes
Record daily collections, browse them by date or period, and manage the
individual customer sales behind each entry
"""

from flask import Blueprint, request, jsonify, current_app

from salesbook.errors import ValidationFailed
from salesbook.schemas import (
    SalesEntryCreate, IndividualSaleCreate, DateRangeQuery,
    validate, validate_date_param,
)
from salesbook.services import aggregation_service, ledger_service
from salesbook.utils.error_logger import store_errors
from salesbook.utils.helpers import get_date_range, serialize

bp = Blueprint('sales_entries', __name__)


def parse_range_args(args):
    """
    Read a date range from the query string.

    Either from_date/to_date, or a named period (today, this_week,
    last_month, ...) resolved against an explicit as_of date.
    """
    params = {
        'from_date': args.get('from_date'),
        'to_date': args.get('to_date'),
        'salesperson_id': args.get('salesperson_id'),
    }

    period = args.get('period')
    if period:
        as_of_date = validate_date_param(args.get('as_of'), 'as_of', 'As of date')
        try:
            params['from_date'], params['to_date'] = get_date_range(period, as_of_date)
        except ValueError as e:
            raise ValidationFailed([{'field': 'period', 'message': str(e)}])

    params = {key: value for key, value in params.items() if value is not None}
    return validate(DateRangeQuery, params)


@bp.route('/sales-entries', methods=['POST'])
@store_errors('Failed to create sales entry')
def create_sales_entry():
    """Record a submission; optional individual_sales are stored atomically with it"""
    data = validate(
        SalesEntryCreate,
        request.get_json(silent=True),
        payment_methods=current_app.config['PAYMENT_METHODS']
    )
    entry = ledger_service.create_sales_entry(data)

    result = entry.to_dict()
    result['individual_sales'] = [s.to_dict() for s in ledger_service.list_individual_sales(entry.id)]
    return jsonify(result), 201


@bp.route('/sales-entries/date/<date_str>')
@store_errors('Failed to fetch sales entries')
def list_by_date(date_str):
    as_of_date = validate_date_param(date_str)
    entries = ledger_service.list_sales_entries_by_date(as_of_date)
    return jsonify([entry.to_dict() for entry in entries])


@bp.route('/sales-entries')
@store_errors('Failed to fetch sales entries')
def list_in_range():
    """
    Historical entries

    Query params:
        from_date, to_date: Inclusive range (required unless period is given)
        period, as_of: Named period relative to as_of
        salesperson_id: Optional filter
    """
    query = parse_range_args(request.args)
    entries = ledger_service.list_sales_entries_in_range(
        query.from_date, query.to_date, query.salesperson_id
    )
    return jsonify([entry.to_dict() for entry in entries])


@bp.route('/sales-entries/summary')
@store_errors('Failed to fetch sales summary')
def range_summary():
    """Period totals for the same filters as the historical list"""
    query = parse_range_args(request.args)
    totals = aggregation_service.range_totals(
        query.from_date, query.to_date, query.salesperson_id
    )
    return jsonify(serialize(totals))


@bp.route('/sales-entries/<int:entry_id>')
@store_errors('Failed to fetch sales entry')
def get_sales_entry(entry_id):
    entry = ledger_service.get_sales_entry(entry_id)
    result = entry.to_dict()
    result['individual_sales'] = [s.to_dict() for s in ledger_service.list_individual_sales(entry.id)]
    return jsonify(result)


@bp.route('/sales-entries/<int:entry_id>', methods=['DELETE'])
@store_errors('Failed to delete sales entry')
def delete_sales_entry(entry_id):
    ledger_service.delete_sales_entry(entry_id)
    return '', 204


# ============================================================
# INDIVIDUAL SALES
# ============================================================

@bp.route('/sales-entries/<int:entry_id>/individual-sales')
@store_errors('Failed to fetch individual sales')
def list_individual_sales(entry_id):
    sales = ledger_service.list_individual_sales(entry_id)
    return jsonify([sale.to_dict() for sale in sales])


@bp.route('/sales-entries/<int:entry_id>/individual-sales', methods=['POST'])
@store_errors('Failed to create individual sale')
def create_individual_sale(entry_id):
    payload = request.get_json(silent=True)
    if isinstance(payload, dict):
        payload = dict(payload, sales_entry_id=entry_id)

    data = validate(
        IndividualSaleCreate,
        payload,
        payment_methods=current_app.config['PAYMENT_METHODS']
    )
    sale = ledger_service.create_individual_sale(data)
    return jsonify(sale.to_dict()), 201
