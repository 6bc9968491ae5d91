"""
Salesperson Routes
Register and list sales staff
"""

from flask import Blueprint, request, jsonify, current_app

from salesbook.schemas import SalespersonCreate, validate
from salesbook.services import ledger_service
from salesbook.utils.error_logger import store_errors

bp = Blueprint('salespersons', __name__)


@bp.route('/init', methods=['GET', 'POST'])
@store_errors('Failed to initialize')
def init():
    """Seed the default roster when no salesperson exists yet"""
    created = ledger_service.seed_salespersons(current_app.config['DEFAULT_SALESPERSONS'])
    return jsonify({'message': 'Initialized successfully', 'created': len(created)})


@bp.route('/salespersons')
@store_errors('Failed to fetch salespersons')
def list_salespersons():
    salespersons = ledger_service.list_salespersons()
    return jsonify([s.to_dict() for s in salespersons])


@bp.route('/salespersons', methods=['POST'])
@store_errors('Failed to create salesperson')
def create_salesperson():
    data = validate(SalespersonCreate, request.get_json(silent=True))
    salesperson = ledger_service.create_salesperson(data)
    return jsonify(salesperson.to_dict()), 201
