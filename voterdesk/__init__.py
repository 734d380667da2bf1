from flask import Flask

from .config import Config
from .errors import register_error_handlers
from .extensions import db, migrate, jwt, ma, swagger
from .middleware.request_id import init_request_id
from .swagger_config import swagger_template
from .utils.reference_data import init_reference_data
from .utils.surnames import init_surname_lookup


def create_app(config_class=Config) -> Flask:
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # Extensions
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    ma.init_app(app)
    swagger.template = swagger_template(app)
    swagger.init_app(app)

    # Middleware + errors
    init_request_id(app)
    register_error_handlers(app)

    # Static reference data, read once
    init_surname_lookup(app)
    init_reference_data(app)

    # Register models with the metadata
    from . import models  # noqa: F401

    # Blueprint imports
    from .api.auth.routes import auth_bp
    from .api.voters.routes import voters_bp
    from .api.analytics.routes import analytics_bp
    from .api.reference.routes import reference_bp

    # Blueprints
    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(voters_bp, url_prefix="/api/voters")
    app.register_blueprint(analytics_bp, url_prefix="/api/voters")
    app.register_blueprint(reference_bp, url_prefix="/api")

    # Health check
    @app.get("/health")
    def health():
        return {"status": "ok"}, 200

    return app
