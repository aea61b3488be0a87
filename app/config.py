import os
from datetime import timedelta


def _csv(value):
    return [item.strip() for item in (value or "").split(",") if item.strip()]


class Config:
    SECRET_KEY = os.getenv('SECRET_KEY', 'change-me-in-production')

    # Database
    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URL', 'sqlite:///coaching.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Session tokens live in httpOnly cookies
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY', 'change-me-in-production')
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=8)
    JWT_TOKEN_LOCATION = ['cookies']
    JWT_COOKIE_SECURE = True
    JWT_COOKIE_CSRF_PROTECT = True
    JWT_CSRF_CHECK_FORM = True
    JWT_COOKIE_SAMESITE = 'Lax'
    JWT_ACCESS_COOKIE_PATH = '/'
    JWT_ACCESS_COOKIE_NAME = 'access_token_cookie'
    # A token closer than this to its expiry is reissued on the response
    SESSION_REFRESH_WINDOW = timedelta(minutes=30)

    SESSION_COOKIE_SECURE = True
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'

    # Public URL of the app, used for OAuth redirect URIs
    BASE_URL = os.getenv('BASE_URL', 'http://localhost:5000').rstrip('/')
    CORS_ORIGINS = _csv(os.getenv('CORS_ORIGINS', 'http://localhost:5000'))

    # Google Calendar OAuth
    GOOGLE_CLIENT_ID = os.getenv('GOOGLE_CLIENT_ID')
    GOOGLE_CLIENT_SECRET = os.getenv('GOOGLE_CLIENT_SECRET')
    GOOGLE_OAUTH_STATE_MAX_AGE = 600

    # Web Push (generate with generate_vapid_keys.py)
    VAPID_PUBLIC_KEY = os.getenv('VAPID_PUBLIC_KEY')
    VAPID_PRIVATE_KEY = os.getenv('VAPID_PRIVATE_KEY')
    VAPID_SUBJECT = os.getenv('VAPID_SUBJECT', 'mailto:admin@example.com')

    # Outbound HTTP calls
    HTTP_TIMEOUT = int(os.getenv('HTTP_TIMEOUT', '10'))

    # Rate limiting
    RATELIMIT_STORAGE_URI = os.getenv('RATELIMIT_STORAGE_URI', 'memory://')
    RATELIMIT_HEADERS_ENABLED = True

    # Logging
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    LOG_FILE = os.getenv('LOG_FILE')


class DevelopmentConfig(Config):
    DEBUG = True
    JWT_COOKIE_SECURE = False
    SESSION_COOKIE_SECURE = False


class ProductionConfig(Config):
    DEBUG = False
    SECRET_KEY = os.getenv('SECRET_KEY')
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY')
    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URL')
    PREFERRED_URL_SCHEME = 'https'


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = 'testing-secret-key-with-enough-length'
    JWT_SECRET_KEY = 'testing-jwt-secret-key-with-enough-length'
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    JWT_COOKIE_SECURE = False
    JWT_COOKIE_CSRF_PROTECT = False
    SESSION_COOKIE_SECURE = False
    RATELIMIT_ENABLED = False
    BASE_URL = 'http://localhost'
    GOOGLE_CLIENT_ID = 'test-client-id'
    GOOGLE_CLIENT_SECRET = 'test-client-secret'
    VAPID_PUBLIC_KEY = 'test-public-key'
    VAPID_PRIVATE_KEY = 'test-private-key'
    LOG_FILE = None


config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
