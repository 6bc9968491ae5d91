"""
Flask Application Factory
Initializes and configures the Flask application
"""

from flask import Flask, jsonify
from flask_migrate import Migrate
from flask_wtf.csrf import CSRFProtect, CSRFError, generate_csrf
from werkzeug.exceptions import HTTPException

from config import config
from salesbook.errors import SalesBookError
from salesbook.models import db

# Initialize extensions
migrate = Migrate()
csrf = CSRFProtect()


def create_app(config_name='default'):
    """
    Application factory pattern
    Creates and configures Flask application
    """
    app = Flask(__name__)

    # Load configuration
    app.config.from_object(config[config_name])

    # Validate secret key in production
    if config_name == 'production':
        if not app.config.get('SECRET_KEY') or app.config['SECRET_KEY'] == 'dev-secret-key-change-in-production':
            raise ValueError("Production requires a secure SECRET_KEY. Set it via environment variable.")
        if len(app.config['SECRET_KEY']) < 32:
            raise ValueError("SECRET_KEY must be at least 32 characters for production.")

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    csrf.init_app(app)

    # Register blueprints
    from salesbook.routes.salespersons import bp as salespersons_bp
    app.register_blueprint(salespersons_bp, url_prefix='/api')

    from salesbook.routes.sales_entries import bp as sales_entries_bp
    app.register_blueprint(sales_entries_bp, url_prefix='/api')

    from salesbook.routes.reports import bp as reports_bp
    app.register_blueprint(reports_bp, url_prefix='/api')

    from salesbook.routes.daily_summary import bp as daily_summary_bp
    app.register_blueprint(daily_summary_bp, url_prefix='/api')

    @app.route('/api/health')
    def health():
        return jsonify({'status': 'ok', 'business_name': app.config['BUSINESS_NAME']})

    @app.route('/api/csrf-token')
    def csrf_token():
        """Token for browser clients to send back in the X-CSRFToken header"""
        return jsonify({'csrf_token': generate_csrf()})

    # Error handlers
    @app.errorhandler(SalesBookError)
    def handle_client_error(error):
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(CSRFError)
    def handle_csrf_error(error):
        return jsonify({
            'message': 'CSRF token missing or invalid',
            'error': error.description
        }), 400

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify({'message': error.description}), error.code

    @app.errorhandler(500)
    def internal_error(error):
        db.session.rollback()
        app.logger.error(f"Unhandled error: {error}")
        return jsonify({'message': 'Internal server error'}), 500

    return app
