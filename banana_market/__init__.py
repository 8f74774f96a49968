"""Flask application factory."""

import logging
import os
from flask import Flask, jsonify
from flask_wtf.csrf import CSRFError
from .config import config
from .extensions import db, migrate, login_manager, bcrypt, csrf, cors
from .exceptions import AppException


def configure_logging(app):
    """Configure root logging from the LOG_LEVEL setting."""
    level = app.config.get('LOG_LEVEL', 'INFO')
    logging.basicConfig(
        level=level,
        format='%(asctime)s %(levelname)s [%(name)s] %(message)s'
    )
    app.logger.setLevel(level)


def create_app(config_name=None):
    """Create and configure the Flask application."""
    if config_name is None:
        config_name = os.environ.get('FLASK_CONFIG', 'development')

    app = Flask(__name__)
    app.config.from_object(config[config_name])

    configure_logging(app)

    # Default SQLite database lives in the instance folder
    os.makedirs(app.instance_path, exist_ok=True)

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    bcrypt.init_app(app)
    csrf.init_app(app)
    cors.init_app(app, resources={
        r'/functions/*': {
            'origins': '*',
            'send_wildcard': True,
            'allow_headers': app.config['CORS_ALLOW_HEADERS'],
        }
    })

    # Register blueprints
    from .routes import register_blueprints
    register_blueprints(app)

    from .cli import register_cli
    register_cli(app)

    # User loader for Flask-Login
    from .models import User

    @login_manager.user_loader
    def load_user(user_id):
        return User.query.get(int(user_id))

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({'success': False, 'message': 'Authentication required'}), 401

    # Error handlers
    @app.errorhandler(AppException)
    def app_exception(error):
        db.session.rollback()
        body = {'success': False, 'message': error.message}
        if error.details:
            body['errors'] = error.details
        return jsonify(body), error.status_code

    @app.errorhandler(CSRFError)
    def csrf_error(error):
        return jsonify({'success': False, 'message': error.description}), 400

    @app.errorhandler(400)
    def bad_request(error):
        return jsonify({'success': False, 'message': 'Bad request'}), 400

    @app.errorhandler(404)
    def not_found_error(error):
        return jsonify({'success': False, 'message': 'Not found'}), 404

    @app.errorhandler(405)
    def method_not_allowed(error):
        return jsonify({'success': False, 'message': 'Method not allowed'}), 405

    @app.errorhandler(500)
    def internal_error(error):
        db.session.rollback()
        return jsonify({'success': False, 'message': 'Internal server error'}), 500

    @app.get('/health')
    def health():
        return jsonify({'success': True, 'message': 'API running'})

    return app
