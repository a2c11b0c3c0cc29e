import logging
import os
import sys

from dotenv import load_dotenv

from feedlot import create_app

# Load environment variables from .env file
load_dotenv(verbose=True)

app = create_app()


def _serve_with_gunicorn(app, host, port):
    from gunicorn.app.base import BaseApplication

    class FeedlotApplication(BaseApplication):
        def __init__(self, app, options=None):
            self.options = options or {}
            self.application = app
            super().__init__()

        def load_config(self):
            for key, value in self.options.items():
                if key in self.cfg.settings and value is not None:
                    self.cfg.set(key.lower(), value)

        def load(self):
            return self.application

    FeedlotApplication(app, {
        'bind': f"{host}:{port}",
        'workers': int(os.environ.get('GUNICORN_WORKERS', 2)),
        'loglevel': os.environ.get('GUNICORN_LOG_LEVEL', 'info'),
    }).run()


if __name__ == '__main__':
    log = logging.getLogger('waitress' if sys.platform == 'win32' else 'gunicorn')
    log.setLevel(logging.INFO)

    host = os.environ.get('FLASK_RUN_HOST', '0.0.0.0')
    port = int(os.environ.get('FLASK_RUN_PORT', 5000))

    log.info("--- Feedlot Health Application Starting ---")
    log.info("Configuration: '%s'", os.getenv('FLASK_CONFIG', 'development'))
    log.info("Atomic event writes: %s", app.config['ATOMIC_EVENT_WRITES'])
    log.info("Server starting on http://%s:%s", host, port)

    if sys.platform == 'win32':
        from waitress import serve
        serve(app, host=host, port=port)
    else:
        _serve_with_gunicorn(app, host, port)
