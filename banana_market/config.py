import os
from dotenv import load_dotenv

load_dotenv()


class Config:
    """Base configuration."""
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'

    # CSRF Configuration
    WTF_CSRF_ENABLED = True
    WTF_CSRF_CHECK_DEFAULT = True
    WTF_CSRF_TIME_LIMIT = 3600  # 1 hour

    # Database - Using SQLite for easy local development
    basedir = os.path.dirname(os.path.dirname(__file__))
    DATABASE_URL = os.environ.get('DATABASE_URL')
    SQLALCHEMY_DATABASE_URI = DATABASE_URL or \
        f'sqlite:///{os.path.join(basedir, "instance", "banana_market.db")}'
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Service key the scheduler presents to the sweep endpoints
    SERVICE_ROLE_KEY = os.environ.get('SERVICE_ROLE_KEY')

    # Order lifecycle windows
    CONFIRMATION_WINDOW_HOURS = int(os.environ.get('CONFIRMATION_WINDOW_HOURS', 48))
    HARVEST_PICKUP_WINDOW_DAYS = int(os.environ.get('HARVEST_PICKUP_WINDOW_DAYS', 7))

    # CORS for the scheduled handlers
    CORS_ALLOW_HEADERS = ['authorization', 'x-client-info', 'apikey', 'content-type']

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    # Pagination
    ITEMS_PER_PAGE = 12


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True
    SQLALCHEMY_ECHO = False
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'DEBUG')


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False


class TestingConfig(Config):
    """Testing configuration."""
    TESTING = True
    DATABASE_URL = 'sqlite:///:memory:'
    SQLALCHEMY_DATABASE_URI = DATABASE_URL
    WTF_CSRF_ENABLED = False
    SERVICE_ROLE_KEY = 'test-service-key'
    BCRYPT_LOG_ROUNDS = 4


config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
