"""
Reports Routes
Daily totals, per-salesperson breakdowns, period history and exports
"""

from flask import Blueprint, request, jsonify, send_file, current_app

from salesbook.errors import ValidationFailed
from salesbook.routes.sales_entries import parse_range_args
from salesbook.schemas import validate_date_param
from salesbook.services import aggregation_service, ledger_service, reconciliation_service
from salesbook.utils.error_logger import store_errors
from salesbook.utils.export import (
    EXPORT_FORMATS, EXCEL_MIMETYPE, CSV_MIMETYPE,
    export_daily_report, export_sales_records,
)
from salesbook.utils.helpers import serialize

bp = Blueprint('reports', __name__)


def _export_format():
    export_format = request.args.get('format', 'csv')
    if export_format not in EXPORT_FORMATS:
        raise ValidationFailed([{
            'field': 'format',
            'message': f"Format must be one of: {', '.join(EXPORT_FORMATS)}"
        }])
    return export_format


def _send_export(output, basename, export_format):
    extension = 'xlsx' if export_format == 'excel' else 'csv'
    return send_file(
        output,
        mimetype=EXCEL_MIMETYPE if export_format == 'excel' else CSV_MIMETYPE,
        as_attachment=True,
        download_name=f"{basename}.{extension}"
    )


@bp.route('/daily-totals/<date_str>')
@store_errors('Failed to fetch daily totals')
def daily_totals(date_str):
    """Cash, digital, expenses and net across all entries of a date"""
    as_of_date = validate_date_param(date_str)
    return jsonify(serialize(aggregation_service.daily_totals(as_of_date)))


@bp.route('/salesperson-summary/<date_str>')
@store_errors('Failed to fetch salesperson summary')
def salesperson_summary(date_str):
    as_of_date = validate_date_param(date_str)
    return jsonify(serialize(aggregation_service.per_salesperson_totals(as_of_date)))


@bp.route('/reports/daily/<date_str>')
@store_errors('Failed to build daily report')
def daily_report(date_str):
    """Everything the dashboard shows for one date in a single payload"""
    as_of_date = validate_date_param(date_str)
    summary = reconciliation_service.get_daily_summary(as_of_date)

    return jsonify({
        'date': as_of_date.isoformat(),
        'totals': serialize(aggregation_service.daily_totals(as_of_date)),
        'salespersons': serialize(aggregation_service.per_salesperson_totals(as_of_date)),
        'entries': [entry.to_dict() for entry in ledger_service.list_sales_entries_by_date(as_of_date)],
        'summary': summary.to_dict() if summary else None,
    })


@bp.route('/reports/history')
@store_errors('Failed to build history report')
def history_report():
    """Period totals plus a per-date breakdown for the historical view"""
    query = parse_range_args(request.args)

    return jsonify({
        'totals': serialize(aggregation_service.range_totals(
            query.from_date, query.to_date, query.salesperson_id)),
        'by_date': serialize(aggregation_service.totals_by_date(
            query.from_date, query.to_date, query.salesperson_id)),
    })


@bp.route('/reports/daily/<date_str>/export')
@store_errors('Export failed')
def export_daily(date_str):
    """
    Export the per-salesperson breakdown of a date

    Query params:
        format: csv or excel (default: csv)
    """
    as_of_date = validate_date_param(date_str)
    export_format = _export_format()

    output = export_daily_report(
        as_of_date,
        aggregation_service.daily_totals(as_of_date),
        aggregation_service.per_salesperson_totals(as_of_date),
        summary=reconciliation_service.get_daily_summary(as_of_date),
        format_type=export_format,
        currency_symbol=current_app.config['CURRENCY_SYMBOL']
    )
    current_app.logger.info(f"Daily report for {as_of_date} exported as {export_format}")
    return _send_export(output, f"daily-sales-report-{as_of_date}", export_format)


@bp.route('/reports/history/export')
@store_errors('Export failed')
def export_history():
    """
    Export the historical entries of a period

    Query params:
        from_date, to_date or period/as_of, salesperson_id, format
    """
    query = parse_range_args(request.args)
    export_format = _export_format()

    salesperson_name = None
    if query.salesperson_id:
        salesperson_name = ledger_service.get_salesperson(query.salesperson_id).name

    output = export_sales_records(
        ledger_service.list_sales_entries_in_range(query.from_date, query.to_date, query.salesperson_id),
        aggregation_service.range_totals(query.from_date, query.to_date, query.salesperson_id),
        salesperson_name=salesperson_name,
        format_type=export_format,
        currency_symbol=current_app.config['CURRENCY_SYMBOL']
    )
    current_app.logger.info(
        f"Sales records {query.from_date} to {query.to_date} exported as {export_format}"
    )
    return _send_export(output, f"sales-records-{query.from_date}-to-{query.to_date}", export_format)
