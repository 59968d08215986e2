import logging
import os

from flask import Flask, jsonify

from plastic_challenge.authenticate import load_actor
from plastic_challenge.config import config
from plastic_challenge.extensions import db, migrate

logger = logging.getLogger("plastic_challenge")


def create_app(config_name=None):
    app = Flask(__name__, instance_relative_config=True)
    config_name = config_name or os.environ.get("FLASK_CONFIG", "default")
    app.config.from_object(config[config_name])

    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    # Default to a SQLite file in the instance folder.
    if not app.config.get("SQLALCHEMY_DATABASE_URI"):
        os.makedirs(app.instance_path, exist_ok=True)
        app.config["SQLALCHEMY_DATABASE_URI"] = "sqlite:///" + os.path.join(app.instance_path, "plastic_challenge.db")

    db.init_app(app)
    migrate.init_app(app, db)

    # Resolve the session into g.actor before every request.
    app.before_request(load_actor)

    from plastic_challenge.routes import register_blueprints

    register_blueprints(app)
    _register_error_handlers(app)

    from plastic_challenge.cli import register_cli

    register_cli(app)

    logger.info("Application created with %s config", config_name)
    return app


def _register_error_handlers(app):
    @app.errorhandler(400)
    def handle_400(err):
        return jsonify({"success": False, "error": err.description or "Bad request"}), 400

    @app.errorhandler(403)
    def handle_403(err):
        return jsonify({"success": False, "error": "Forbidden"}), 403

    @app.errorhandler(404)
    def handle_404(err):
        return jsonify({"success": False, "error": "Not found"}), 404

    @app.errorhandler(405)
    def handle_405(err):
        return jsonify({"success": False, "error": "Method not allowed"}), 405

    @app.errorhandler(500)
    def handle_500(err):
        logger.exception("Unhandled server error")
        db.session.rollback()
        return jsonify({"success": False, "error": "Internal server error"}), 500
