import logging
import os

import click
from flask import Flask
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from config import Config
from db import Database, init_database, seed_default_categories
from errors import ApiError, DatabaseConnectionError
from utils import response

logger = logging.getLogger(__name__)


def configure_logging(level):
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )


def register_error_handlers(app):
    """Every failure still produces the standard JSON envelope"""

    @app.errorhandler(ApiError)
    def handle_api_error(error):
        if error.status_code >= 500:
            logger.error('%s: %s', type(error).__name__, error.message)
        return response.send(response.from_error(error))

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return response.send(response.failure(error.description or error.name, error.code))

    @app.errorhandler(Exception)
    def handle_error(error):
        logger.exception('Unhandled error: %s', error)
        return response.send(response.failure(f'An error occurred: {error}', 500))


def register_commands(app):
    @app.cli.command('init-db')
    @click.option('--seed', is_flag=True, help='Insert the default project categories.')
    def init_db_command(seed):
        """Create the portfolio tables."""
        database = app.extensions['database']
        init_database(database)
        if seed:
            added = seed_default_categories(database)
            click.echo(f'Added {added} default categories')
        click.echo('Database initialized')


def create_app(overrides=None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if overrides:
        app.config.update(overrides)

    configure_logging(app.config['LOG_LEVEL'])

    # Allow all origins for the public portfolio API
    CORS(app, send_wildcard=True)

    os.makedirs(app.config['UPLOAD_FOLDER'], exist_ok=True)

    database = Database(app.config['DATABASE_URL'])
    app.extensions['database'] = database

    register_error_handlers(app)
    register_commands(app)

    from routes import init_routes
    init_routes(app)

    try:
        init_database(database)
    except DatabaseConnectionError as e:
        # Requests report the outage; /api/health shows the database as disconnected
        logger.error('Skipping schema initialization: %s', e.message)

    return app


if __name__ == '__main__':
    create_app().run(debug=True, host='0.0.0.0', port=5000, use_reloader=False)
