import logging
from flask import Flask
from flask_cors import CORS


def create_app(config_name='default'):
    """Application factory pattern"""
    app = Flask(__name__)

    # Load environment variables before config classes read them
    from dotenv import load_dotenv
    load_dotenv()

    from config import config, get_database_uri
    app.config.from_object(config[config_name])

    if not app.config.get('SQLALCHEMY_DATABASE_URI'):
        app.config['SQLALCHEMY_DATABASE_URI'] = get_database_uri()

    # Configure logging
    if not app.testing:
        logging.basicConfig(
            level=getattr(logging, app.config['LOG_LEVEL'].upper(), logging.INFO),
            format='%(asctime)s %(levelname)s %(name)s: %(message)s'
        )

    # Initialize correlation ID middleware
    from product_service.middlewares.correlation_id import CorrelationIdMiddleware, init_correlation_id_logging
    CorrelationIdMiddleware(app)
    init_correlation_id_logging(app)

    # Initialize database
    from product_service.database import init_db
    init_db(app)

    # Initialize Redis response cache
    from product_service.utils.cache import init_cache
    init_cache(app)

    # CORS setup
    CORS(app, origins=app.config.get('CORS_ORIGINS', ['*']))

    # Register blueprints
    from product_service.api.controllers import products_bp, health_bp
    app.register_blueprint(products_bp, url_prefix='/api')
    app.register_blueprint(health_bp)
    app.logger.info("Product API registered successfully")

    # Register error handlers
    from product_service.utils.error_handlers import register_error_handlers
    register_error_handlers(app)

    if app.config.get('ENABLE_TRACING'):
        from product_service.utils.telemetry import init_telemetry
        init_telemetry(app)

    return app


def init_database(app):
    """Initialize database tables - call this explicitly when ready"""
    from product_service.database import db
    with app.app_context():
        try:
            from sqlalchemy import text
            db.session.execute(text('SELECT 1'))  # Test connection
            db.create_all()
            app.logger.info("Database tables created successfully")
            return True
        except Exception as e:
            app.logger.error(f"Failed to create database tables: {e}")
            if not app.debug:
                # Outside development, fail fast
                raise
            app.logger.warning("Continuing without database connection in development mode")
            return False
