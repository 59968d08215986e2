# Import Flask routing primitives for log entry APIs.
from flask import Blueprint, jsonify, request

# Import auth guard, form schema and log store.
from plastic_challenge.authenticate import current_actor, login_required
from plastic_challenge.forms import LogEntryForm
from plastic_challenge.logs import record_log_entry, recent_logs
from plastic_challenge.routes import error, invalid_form, load_form

# This Blueprint groups a participant's own log entries.
logs_bp = Blueprint("logs", __name__)


@logs_bp.route("/logs", methods=["GET"])
@login_required
def list_logs():
    limit = request.args.get("limit", 10, type=int)
    limit = max(1, min(limit, 100))
    logs = recent_logs(current_actor().user_id, limit=limit)
    return jsonify({"success": True, "logs": [log.to_dict() for log in logs]}), 200


@logs_bp.route("/logs", methods=["POST"])
@login_required
def create_log():
    """
    Record items avoided and award any certificates unlocked.

    Expected JSON format:
    {
        "category": "bottle",
        "quantity": 3,
        "log_date": "2024-05-01"
    }
    """
    form = load_form(LogEntryForm)
    if not form.validate():
        return invalid_form(form)

    try:
        entry, awards = record_log_entry(
            current_actor(), form.category.data, form.quantity.data, form.log_date.data
        )
    except ValueError as exc:
        return error(str(exc), 400)

    message = "Log entry added successfully!"
    if awards:
        names = ", ".join(award.certificate.name for award in awards)
        message += f" Congratulations! You earned: {names}"

    return jsonify({
        "success": True,
        "message": message,
        "log": entry.to_dict(),
        "new_certificates": [award.to_dict() for award in awards],
    }), 201
