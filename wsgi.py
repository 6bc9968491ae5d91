"""
WSGI Entry Point
Used by gunicorn/uwsgi: `gunicorn wsgi:application`
"""

import os

from salesbook import create_app

application = create_app(os.environ.get('FLASK_ENV', 'production'))
