# Import Flask request/response helpers shared by every blueprint.
from flask import abort, jsonify, request
from werkzeug.datastructures import MultiDict


# Read a JSON object body; anything else is a rejected submission.
def json_payload():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        abort(400, description="Request body must be a JSON object")
    # Match form-post semantics: missing instead of null, text instead of numbers.
    return {key: str(value) for key, value in data.items() if value is not None}


# Build a form from a JSON body or a regular form post.
def load_form(form_cls):
    if request.is_json:
        # JSON clients are covered by the SameSite session cookie, not CSRF tokens.
        return form_cls(formdata=MultiDict(json_payload()), meta={"csrf": False})
    return form_cls()


def invalid_form(form):
    return jsonify({"success": False, "error": "Invalid input", "details": form.errors}), 400


def error(message, status):
    return jsonify({"success": False, "error": message}), status


def register_blueprints(app):
    from plastic_challenge.routes.admin_routes import admin_bp
    from plastic_challenge.routes.auth_routes import auth_bp
    from plastic_challenge.routes.log_routes import logs_bp
    from plastic_challenge.routes.main_routes import main_bp

    app.register_blueprint(main_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(logs_bp)
    app.register_blueprint(admin_bp)
