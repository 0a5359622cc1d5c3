import os
from decimal import Decimal
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Config:
    """Base configuration - shared across all environments"""

    SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-secret-key')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    BASE_DIR = os.path.dirname(os.path.abspath(__file__))

    # Tax defaults (BC: GST 5% + PST 7%). Injected into TaxRatePolicy.
    DEFAULT_GST_RATE = Decimal(os.environ.get('DEFAULT_GST_RATE', '0.05'))
    DEFAULT_PST_RATE = Decimal(os.environ.get('DEFAULT_PST_RATE', '0.07'))

    # Editor prefill for LEVY lines
    LEVY_DEFAULT_DESCRIPTION = os.environ.get('LEVY_DEFAULT_DESCRIPTION', 'ECO Fee')
    LEVY_DEFAULT_UNIT_PRICE = Decimal(os.environ.get('LEVY_DEFAULT_UNIT_PRICE', '6.50'))

    QUOTATION_VALID_DAYS = int(os.environ.get('QUOTATION_VALID_DAYS', '30'))
    DISPLAY_TIMEZONE = os.environ.get('DISPLAY_TIMEZONE', 'America/Vancouver')

    # Logging
    LOG_DIR = os.environ.get('LOG_DIR', os.path.join(BASE_DIR, 'logs'))
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    # Rate limiting
    RATELIMIT_DEFAULT = "1000 per day;500 per hour"
    PREVIEW_RATE_LIMIT = os.environ.get("PREVIEW_RATE_LIMIT", "120 per minute")

    CORS_ORIGINS = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:4200",
        "http://127.0.0.1:4200",
    ]


class DevConfig(Config):
    """Development configuration"""
    DEBUG = True
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'DEBUG')
    FLASK_HOST = '0.0.0.0'
    FLASK_PORT = 5000

    STORAGE_PATH = str(Path(__file__).resolve().parents[1] / "tireshop-storage" / "database")
    DB_PATH = os.path.join(STORAGE_PATH, 'tireshop.db')
    SQLALCHEMY_DATABASE_URI = os.environ.get('SQLALCHEMY_DATABASE_URI', f"sqlite:///{DB_PATH}")


class TestConfig(Config):
    """Test configuration - in-memory database, console logging only"""
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    LOG_DIR = None
    LOG_LEVEL = 'DEBUG'
    RATELIMIT_ENABLED = False
    DEFAULT_GST_RATE = Decimal('0.05')
    DEFAULT_PST_RATE = Decimal('0.07')


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False
    FLASK_HOST = '::'
    FLASK_PORT = 5000
    CORS_ORIGINS = [o for o in os.environ.get('CORS_ORIGINS', '').split(',') if o]

    STORAGE_PATH = str(Path(__file__).resolve().parents[1] / "tireshop-storage" / "database")
    DB_PATH = os.path.join(STORAGE_PATH, 'tireshop.db')
    SQLALCHEMY_DATABASE_URI = os.environ.get('SQLALCHEMY_DATABASE_URI', f"sqlite:///{DB_PATH}")


CONFIG_BY_NAME = {
    'development': DevConfig,
    'testing': TestConfig,
    'production': ProductionConfig,
}


def get_config(name=None):
    name = name or os.environ.get('APP_ENV', 'development')
    return CONFIG_BY_NAME.get(name, DevConfig)
