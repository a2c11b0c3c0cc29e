# feedlot/config.py
import os

import pytz
from dotenv import load_dotenv
from sqlalchemy.pool import StaticPool

# Load environment variables from .env file first
load_dotenv()

class Config:
    """Base configuration."""
    SECRET_KEY = os.environ.get('SECRET_KEY')

    SQLALCHEMY_TRACK_MODIFICATIONS = False
    APP_LOG_LEVEL = os.environ.get('APP_LOG_LEVEL', 'INFO').upper()
    SQLALCHEMY_ECHO = os.environ.get('SQLALCHEMY_ECHO', 'False').lower() == 'true' # Log SQL queries
    SQL_DEBUG = os.environ.get('SQL_DEBUG', 'False').lower() == 'true' # Log SQL queries
    DEBUG = os.environ.get('FLASK_DEBUG', 'False').lower() in ['true', '1', 't', 'yes', 'on']

    # Timezone used to date events when the form leaves the date blank
    TIMEZONE = os.environ.get('TIMEZONE', 'UTC')
    LOCAL_TZ = pytz.timezone(TIMEZONE)

    # When False, the event record and the animal update are committed separately
    # and a failed animal update is reported as a PartialWriteWarning.
    ATOMIC_EVENT_WRITES = os.environ.get('ATOMIC_EVENT_WRITES', 'True').lower() == 'true'

    # --- Project Paths ---
    basedir = os.path.abspath(os.path.dirname(__file__))
    PROJECT_ROOT = os.path.abspath(os.path.join(basedir, os.pardir))
    UPLOAD_FOLDER = os.environ.get('UPLOAD_FOLDER', os.path.join(PROJECT_ROOT, 'uploads'))

    # Death photos are small; 16MB is plenty
    MAX_CONTENT_LENGTH = int(os.environ.get('MAX_CONTENT_LENGTH', 16 * 1024 * 1024))

    # --- Database Configuration ---
    DB_TYPE = os.environ.get('DB_TYPE', 'sqlite')

    if DB_TYPE == 'mysql':
        DB_USER = os.environ.get('DB_USER')
        DB_PASSWORD = os.environ.get('DB_PASSWORD')
        DB_HOST = os.environ.get('DB_HOST')
        DB_PORT = os.environ.get('DB_PORT', '3306')
        DB_NAME = os.environ.get('DB_NAME')

        if not all([DB_USER, DB_PASSWORD, DB_HOST, DB_NAME]):
            raise ValueError("For DB_TYPE=mysql, you must set DB_USER, DB_PASSWORD, DB_HOST, and DB_NAME environment variables.")

        SQLALCHEMY_DATABASE_URI = f"mysql+pymysql://{DB_USER}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}?charset=utf8mb4"

        SQLALCHEMY_ENGINE_OPTIONS = {
            'pool_pre_ping': True,
            'pool_size': 10,
            'max_overflow': 20,
            'pool_recycle': 3600,
            'pool_timeout': 30,
            'isolation_level': 'READ COMMITTED',
        }
    else:
        # Default to SQLite
        instance_dir = os.environ.get('INSTANCE_PATH', os.path.join(PROJECT_ROOT, 'instance'))
        db_path = os.path.join(instance_dir, 'feedlot.db')
        SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL', f'sqlite:///{db_path}')

        SQLALCHEMY_ENGINE_OPTIONS = {
            'connect_args': {
                'timeout': 30,
                'check_same_thread': False
            },
            'pool_pre_ping': True,
        }

    @classmethod
    def check_configuration(cls):
        """
        Validates that critical configuration variables are set.
        Raises ValueError if any are missing in a production environment.
        """
        debug_mode = os.environ.get('FLASK_DEBUG', 'False').lower() in ['true', '1', 't', 'yes', 'on']

        if not debug_mode and not cls.SECRET_KEY:
            raise ValueError("CRITICAL: SECRET_KEY is missing in production configuration.")


class TestingConfig(Config):
    """Configuration for testing environment."""
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'  # Use in-memory SQLite database
    SERVER_NAME = 'localhost.localdomain'
    SECRET_KEY = 'test-secret-key'
    ATOMIC_EVENT_WRITES = True
    TIMEZONE = 'UTC'
    LOCAL_TZ = pytz.timezone(TIMEZONE)

    SQLALCHEMY_ENGINE_OPTIONS = {
        'connect_args': {
            'check_same_thread': False
        },
        'poolclass': StaticPool,
        'pool_pre_ping': False
    }
