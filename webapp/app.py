"""
Flask Application Factory

Creates and configures the Flask application instance.
"""

import logging
from datetime import datetime
from flask import Flask, jsonify

from config.database import configure_database, init_database
from config.settings import SECRET_KEY
from utils.errors import LyricMatchError, LockedError
from webapp.routes.auth import auth_bp
from webapp.routes.favorites import favorites_bp
from webapp.routes.social import social_bp
from webapp.routes.wordcloud import wordcloud_bp

logger = logging.getLogger(__name__)


def create_app(database_url=None, testing=False):
    """
    Create and configure the Flask application.

    Args:
        database_url (str, optional): Overrides LYRICMATCH_DATABASE_URL
        testing (bool): Enable Flask testing mode

    Returns:
        flask.Flask: The configured application
    """
    app = Flask(__name__)
    app.secret_key = SECRET_KEY
    app.config['TESTING'] = testing

    configure_database(database_url)
    init_database()

    app.register_blueprint(auth_bp)
    app.register_blueprint(favorites_bp)
    app.register_blueprint(wordcloud_bp)
    app.register_blueprint(social_bp)

    @app.errorhandler(LyricMatchError)
    def handle_app_error(error):
        if error.status_code >= 500:
            logger.error(f"Request failed: {error}")
        response = jsonify(error.to_dict())
        response.status_code = error.status_code
        if isinstance(error, LockedError) and error.locked_until is not None:
            retry_after = max(0, int((error.locked_until - datetime.now()).total_seconds()))
            response.headers['Retry-After'] = str(retry_after)
        return response

    @app.route('/api/health')
    def health():
        """Health check endpoint."""
        return {
            'status': 'ok',
            'timestamp': datetime.now().isoformat()
        }

    return app
