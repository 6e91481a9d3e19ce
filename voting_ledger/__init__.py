import uuid

from dotenv import load_dotenv
from flask import Flask
from flasgger import Swagger

from .config import Config
from .errors import register_error_handlers
from .extensions import db, migrate, jwt, ma
from .middleware.request_id import init_request_id
from .swagger_config import swagger_template

load_dotenv()


def create_app(config_class=Config) -> Flask:
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    Swagger(app, template=swagger_template(app))

    # Extensions
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    ma.init_app(app)

    # Middleware + errors
    init_request_id(app)
    register_error_handlers(app)

    from .models import Voter

    # Tokens come from the auth service; the identity is the voter id
    @jwt.user_lookup_loader
    def load_current_voter(_jwt_header, jwt_payload):
        try:
            voter_id = uuid.UUID(str(jwt_payload.get("sub")))
        except ValueError:
            return None
        return db.session.get(Voter, voter_id)

    # Blueprint imports
    from .api.voting.routes import voting_bp
    from .api.results.routes import results_bp
    from .api.admin.routes import admin_bp

    # Blueprints
    app.register_blueprint(voting_bp, url_prefix="/api/votes")
    app.register_blueprint(results_bp, url_prefix="/api/votes")
    app.register_blueprint(admin_bp, url_prefix="/api/admin")

    from .commands import reconcile_tallies_command
    app.cli.add_command(reconcile_tallies_command)

    @app.get("/health")
    def health():
        return {"status": "ok"}, 200

    return app
