"""
Error Logger Utility
Logs store failures with request context and turns them into JSON responses.
"""

import json
import logging
from functools import wraps

from flask import request, has_request_context, jsonify
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)

# Keys to redact from request data
SENSITIVE_KEYS = {
    'password', 'token', 'csrf_token', 'secret', 'api_key',
    'authorization', 'cookie', 'session'
}


def _sanitize_data(data):
    """Redact sensitive keys from a dict."""
    if not isinstance(data, dict):
        return data
    sanitized = {}
    for key, value in data.items():
        if any(s in key.lower() for s in SENSITIVE_KEYS):
            sanitized[key] = '[REDACTED]'
        elif isinstance(value, dict):
            sanitized[key] = _sanitize_data(value)
        else:
            sanitized[key] = str(value)[:500]  # Truncate long values
    return sanitized


def _request_summary():
    if not has_request_context():
        return ''
    raw_data = {}
    if request.args:
        raw_data['args'] = dict(request.args)
    payload = request.get_json(silent=True)
    if isinstance(payload, dict):
        raw_data['json'] = payload
    summary = f"{request.method} {request.path}"
    if raw_data:
        summary += f" {json.dumps(_sanitize_data(raw_data))[:4000]}"
    return summary


def log_error(error, operation=None):
    """
    Log an error together with the request that caused it.

    Args:
        error: The exception
        operation: Short description of what was being attempted
    """
    logger.error(
        "%s: %s: %s [%s]",
        operation or 'Unhandled error',
        type(error).__name__,
        str(error)[:2000],
        _request_summary(),
        exc_info=error
    )


def store_errors(operation):
    """
    Decorator turning database failures into a 500 JSON response

    The session is rolled back and the underlying message is passed through.

    Usage:
        @store_errors('Failed to create sales entry')
        def create_sales_entry():
            ...
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            try:
                return f(*args, **kwargs)
            except SQLAlchemyError as e:
                from salesbook.models import db
                db.session.rollback()
                log_error(e, operation)
                underlying = getattr(e, 'orig', None) or e
                return jsonify({'message': operation, 'error': str(underlying)}), 500
        return decorated_function
    return decorator
