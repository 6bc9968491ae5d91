"""
Application Configuration
Loads environment variables and provides configuration classes for different environments
"""

import os
from dotenv import load_dotenv

# Load environment variables from .env file
basedir = os.path.abspath(os.path.dirname(__file__))
load_dotenv(os.path.join(basedir, '.env'))


def _split_list(value):
    return [item.strip() for item in value.split(',') if item.strip()]


class Config:
    """Base configuration class"""

    # Flask
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'
    JSON_SORT_KEYS = False

    # Database
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or \
        'sqlite:///' + os.path.join(basedir, 'salesbook.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = False

    # Business Configuration
    BUSINESS_NAME = os.environ.get('BUSINESS_NAME', 'SalesBook')
    CURRENCY = os.environ.get('CURRENCY', 'INR')
    CURRENCY_SYMBOL = os.environ.get('CURRENCY_SYMBOL', '₹')

    # Recognised payment methods for individual sales
    PAYMENT_METHODS = _split_list(os.environ.get('PAYMENT_METHODS', 'cash,digital'))

    # Roster inserted by the seeding step when no salesperson exists yet
    DEFAULT_SALESPERSONS = [
        {'name': 'Alice Johnson', 'email': 'alice@company.com'},
        {'name': 'Bob Smith', 'email': 'bob@company.com'},
        {'name': 'Carol Davis', 'email': 'carol@company.com'},
    ]

    # CSRF Configuration
    WTF_CSRF_TIME_LIMIT = None  # CSRF token doesn't expire (valid for session lifetime)
    WTF_CSRF_SSL_STRICT = False
    WTF_CSRF_HEADERS = ['X-CSRFToken', 'X-CSRF-Token']

    # Logging
    LOG_FOLDER = os.path.join(basedir, 'logs')
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True
    SQLALCHEMY_ECHO = False  # Set to True to see SQL queries


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False
    SQLALCHEMY_ECHO = False


class TestingConfig(Config):
    """Testing configuration"""
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    WTF_CSRF_ENABLED = False


# Configuration dictionary
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
