import logging
import os
import sys
from logging.handlers import RotatingFileHandler

from flask import has_request_context, request
from werkzeug.exceptions import HTTPException


# --- Custom Filters ---
class SQLAlchemyFilter(logging.Filter):
    def __init__(self, sql_debug=False):
        super().__init__()
        self.sql_debug = sql_debug

    def filter(self, record):
        # Routine engine chatter only passes when SQL_DEBUG is on
        if record.name == 'sqlalchemy.engine' and record.levelno == logging.INFO:
            return self.sql_debug
        return True


class RequestContextFilter(logging.Filter):
    """Adds request context to log records if available."""

    def filter(self, record):
        if has_request_context():
            record.url = request.url
            record.remote_addr = request.remote_addr
        else:
            record.url = 'N/A (no request context)'
            record.remote_addr = 'N/A'
        return True


# --- Custom Formatter ---
class RichFormatter(logging.Formatter):
    """
    A flexible formatter that includes request context and handles missing 'extra' fields.
    """
    def format(self, record):
        record.url = getattr(record, 'url', 'N/A')
        record.remote_addr = getattr(record, 'remote_addr', 'N/A')
        return super().format(record)


def configure_logging(app):
    # --- Determine Log Level ---
    if app.debug:
        effective_log_level_str = 'DEBUG'
    else:
        effective_log_level_str = app.config.get('APP_LOG_LEVEL', 'INFO').upper()

    log_level = getattr(logging, effective_log_level_str, logging.INFO)

    # --- Base Formatter ---
    base_format = (
        "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d (%(module)s.%(funcName)s)\n"
        "  Message: %(message)s\n"
        "  Request: %(url)s (From: %(remote_addr)s)"
    )
    formatter = RichFormatter(base_format, datefmt='%Y-%m-%d %H:%M:%S')
    sql_debug_enabled = app.config.get('SQL_DEBUG', False)

    for h in list(app.logger.handlers):
        app.logger.removeHandler(h)

    # --- Console Handler ---
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    console_handler.addFilter(RequestContextFilter())
    console_handler.addFilter(SQLAlchemyFilter(sql_debug_enabled))
    app.logger.addHandler(console_handler)

    # --- File Handler ---
    file_handler = None
    if not app.config.get('TESTING', False): # Don't create log files during testing
        log_dir = 'logs'
        try:
            os.makedirs(log_dir, exist_ok=True)
        except OSError as e:
            print(f"CRITICAL: Could not create logs directory '{log_dir}': {e}", file=sys.stderr)

        if os.path.isdir(log_dir):
            file_handler = RotatingFileHandler(
                os.path.join(log_dir, 'feedlot.log'),
                maxBytes=2 * 1024 * 1024,
                backupCount=5,
                encoding='utf-8'
            )
            file_handler.setLevel(log_level)
            file_handler.setFormatter(formatter)
            file_handler.addFilter(RequestContextFilter())
            file_handler.addFilter(SQLAlchemyFilter(sql_debug_enabled))
            app.logger.addHandler(file_handler)

    app.logger.setLevel(log_level)
    app.logger.propagate = False

    # --- SQLAlchemy Logging ---
    sql_echo_enabled = app.config.get('SQLALCHEMY_ECHO', False)
    sql_logger = logging.getLogger('sqlalchemy.engine')
    for h in list(sql_logger.handlers):
        sql_logger.removeHandler(h)

    if sql_echo_enabled or sql_debug_enabled:
        sql_logger.setLevel(logging.INFO) # SQL statements are INFO
        sql_logger.addHandler(console_handler)
        if file_handler is not None:
            sql_logger.addHandler(file_handler)
    else:
        sql_logger.setLevel(logging.WARNING)
    sql_logger.propagate = False

    # --- Request/Response Logging Hooks ---
    @app.before_request
    def log_request_info_hook():
        app.logger.debug(f"HOOK: Incoming request: {request.method} {request.path}")

    @app.after_request
    def log_response_info_hook(response):
        app.logger.debug(f"HOOK: Outgoing response: {response.status_code} for {request.method} {request.path}")
        return response

    # --- Global Error Handler ---
    if not app.testing:
        @app.errorhandler(HTTPException)
        def handle_http_exception(e):
            app.logger.error(f"HTTP exception caught by global handler: {e.name} ({e.code}) for {request.url}")
            # API errors are formatted by the flask-restx handlers
            if request.blueprint == 'api':
                raise e
            return e

        @app.errorhandler(Exception)
        def handle_generic_exception(e):
            app.logger.error(
                f"Unhandled application exception caught by global handler: {e} for {request.url}",
                exc_info=True
            )
            if request.blueprint == 'api':
                raise e
            if not app.debug:
                return "Internal Server Error", 500
            raise e
