import logging
import os
from flask import Flask
from flask_cors import CORS
from tireshop.config import get_config
from tireshop.extensions import db, limiter
from tireshop.utils.request_logger import RequestLogger

logger = logging.getLogger(__name__)


def configure_logging(app):
    handlers = [logging.StreamHandler()]
    log_dir = app.config.get('LOG_DIR')
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        handlers.append(logging.FileHandler(os.path.join(log_dir, 'app.log')))
    logging.basicConfig(
        level=getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
        handlers=handlers,
    )


def create_app(config_object=None):
    app = Flask(__name__)
    app.config.from_object(config_object or get_config())
    configure_logging(app)

    db.init_app(app)
    limiter.init_app(app)
    CORS(app, supports_credentials=True, resources={r"/api/*": {"origins": app.config.get('CORS_ORIGINS', [])}})
    RequestLogger.init_app(app)

    from tireshop.api.health import health_bp
    from tireshop.api.invoice import invoice_bp
    from tireshop.api.pricing import pricing_bp
    from tireshop.api.quotation import quotation_bp

    app.register_blueprint(health_bp, url_prefix='/api')
    app.register_blueprint(pricing_bp, url_prefix='/api')
    app.register_blueprint(invoice_bp, url_prefix='/api')
    app.register_blueprint(quotation_bp, url_prefix='/api')

    with app.app_context():
        # register the tables before create_all
        from tireshop.models import invoice, quotation  # noqa: F401
        storage_path = app.config.get('STORAGE_PATH')
        if storage_path:
            os.makedirs(storage_path, exist_ok=True)
        db.create_all()

    logger.info(f"App created with database {app.config.get('SQLALCHEMY_DATABASE_URI')}")
    return app


if __name__ == '__main__':
    app = create_app()
    app.run(host=app.config.get('FLASK_HOST', '0.0.0.0'), port=app.config.get('FLASK_PORT', 5000))
