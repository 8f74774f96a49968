"""Routes package - register all blueprints."""

from flask import Flask


def register_blueprints(app: Flask):
    """Register all blueprints with the application."""
    from banana_market.extensions import csrf
    from .auth import auth_bp
    from .main import main_bp
    from .customer import customer_bp
    from .orders import orders_bp
    from .farm import farm_bp
    from .admin import admin_bp
    from .jobs import jobs_bp

    # Scheduler calls authenticate with the service key, not a session
    csrf.exempt(jobs_bp)

    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(main_bp, url_prefix='/api')
    app.register_blueprint(customer_bp, url_prefix='/api')
    app.register_blueprint(orders_bp, url_prefix='/api/orders')
    app.register_blueprint(farm_bp, url_prefix='/api/farm')
    app.register_blueprint(admin_bp, url_prefix='/api/admin')
    app.register_blueprint(jobs_bp, url_prefix='/functions')
