"""
Daily Summary Routes
Enter and read the once-per-date cash reconciliation record
"""

from flask import Blueprint, request, jsonify

from salesbook.schemas import DailySummaryCreate, validate, validate_date_param
from salesbook.services import reconciliation_service
from salesbook.utils.error_logger import store_errors

bp = Blueprint('daily_summary', __name__)


@bp.route('/daily-summary/<date_str>')
@store_errors('Failed to fetch daily summary')
def get_daily_summary(date_str):
    """
    Reconciliation record for a date

    'summary' is null when nothing has been entered for that date yet,
    which is distinct from a record whose amounts are all zero.
    """
    as_of_date = validate_date_param(date_str)
    summary = reconciliation_service.get_daily_summary(as_of_date)
    return jsonify({
        'date': as_of_date.isoformat(),
        'summary': summary.to_dict() if summary else None
    })


@bp.route('/daily-summary/<date_str>', methods=['PUT'])
@store_errors('Failed to save daily summary')
def put_daily_summary(date_str):
    """Create or overwrite the record of the date in the URL"""
    payload = request.get_json(silent=True)
    if isinstance(payload, dict):
        payload = dict(payload, date=date_str)

    data = validate(DailySummaryCreate, payload)
    summary = reconciliation_service.save_daily_summary_from(data)
    return jsonify(summary.to_dict())


@bp.route('/daily-summary', methods=['POST'])
@store_errors('Failed to save daily summary')
def post_daily_summary():
    """Same as PUT, with the date taken from the body"""
    data = validate(DailySummaryCreate, request.get_json(silent=True))
    summary = reconciliation_service.save_daily_summary_from(data)
    return jsonify(summary.to_dict())
