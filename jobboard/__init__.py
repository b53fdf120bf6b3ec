import importlib
from datetime import timedelta

from flask import Flask
from flask_cors import CORS

from .config import Config
from .db import db
from .simple_logger import get_logger

__version__ = "1.0.0"


def create_app(config_overrides=None, resume_store=None):
    """Application factory.

    ``config_overrides`` is applied before any extension reads the config.
    ``resume_store`` replaces the S3-backed store built from the config.
    """
    app = Flask(__name__)
    app.config.from_object(Config)
    if config_overrides:
        app.config.update(config_overrides)

    app.logger = get_logger('app')
    app.logger.info("Job board backend starting up")

    CORS(app,
         supports_credentials=True,
         origins=app.config['CORS_ORIGINS'],
         methods=['GET', 'POST', 'PUT', 'DELETE', 'OPTIONS'],
         allow_headers=['Content-Type', 'Authorization'],
         max_age=3600
    )

    db.init_app(app)

    from .auth.tokens import TokenIssuer
    ttl = timedelta(hours=app.config['JWT_EXPIRATION_HOURS'])
    if app.config.get('JWT_SECRET_KEY'):
        app.extensions['token_issuer'] = TokenIssuer(app.config['JWT_SECRET_KEY'], ttl=ttl)
    else:
        app.logger.warning("JWT_SECRET_KEY not set; using a per-process key, tokens will not survive a restart")
        app.extensions['token_issuer'] = TokenIssuer.with_random_key(ttl=ttl)

    if resume_store is None:
        from .resumes.storage import ResumeBlobStore
        resume_store = ResumeBlobStore.from_config(app.config)
    app.extensions['resume_store'] = resume_store

    from .errors import register_error_handlers
    register_error_handlers(app)

    module_registrations = [
        {"module_path": "jobboard.auth.routes", "blueprint_name": "auth_bp"},
        {"module_path": "jobboard.jobs.routes", "blueprint_name": "jobs_bp"},
        {"module_path": "jobboard.resumes.routes", "blueprint_name": "resumes_bp"},
        {"module_path": "jobboard.health_routes", "blueprint_name": "health_bp"},
    ]
    for registration in module_registrations:
        module = importlib.import_module(registration["module_path"])
        app.register_blueprint(getattr(module, registration["blueprint_name"]))

    if app.config.get('AUTO_CREATE_TABLES'):
        from . import models  # noqa: F401
        with app.app_context():
            db.create_all()
        app.logger.info("Database tables ensured")

    @app.route("/")
    def index():
        return "Job board backend is running!", 200

    app.logger.info("Job board backend started successfully")
    return app
