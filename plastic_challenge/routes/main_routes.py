import logging

# Import Flask routing primitives for participant pages.
from flask import Blueprint, current_app, jsonify, request

# Import auth guard, domain helpers and form schemas.
from plastic_challenge.authenticate import current_actor, login_required
from plastic_challenge.awards import user_certificates
from plastic_challenge.extensions import db
from plastic_challenge.forms import ChangePasswordForm, ProfileEmailForm
from plastic_challenge.impact import active_factors
from plastic_challenge.logs import recent_logs
from plastic_challenge.models import User
from plastic_challenge.routes import error, invalid_form, json_payload, load_form
from plastic_challenge.stats import community_stats, leaderboard, user_stats

logger = logging.getLogger(__name__)

# This Blueprint groups the public landing data and participant pages.
main_bp = Blueprint("main", __name__)


# Landing page data: community totals and the leaderboard.
@main_bp.route("/")
def index():
    return jsonify({
        "success": True,
        "site_name": current_app.config["SITE_NAME"],
        "community": community_stats(),
        "leaderboard": leaderboard(current_app.config["LEADERBOARD_SIZE"]),
    }), 200


@main_bp.route("/api/health")
def health():
    return jsonify({"success": True, "status": "ok"}), 200


@main_bp.route("/dashboard")
@login_required
def dashboard():
    actor = current_actor()
    awards = user_certificates(actor.user_id)
    return jsonify({
        "success": True,
        "username": actor.username,
        "stats": user_stats(actor.user_id),
        "recent_logs": [log.to_dict() for log in recent_logs(actor.user_id)],
        "certificates_earned": len(awards),
    }), 200


@main_bp.route("/certificates")
@login_required
def certificates():
    awards = user_certificates(current_actor().user_id)
    return jsonify({"success": True, "certificates": [award.to_dict() for award in awards]}), 200


# Active per-item savings, used by the log form to preview impact.
@main_bp.route("/factors")
@login_required
def factors():
    rows = sorted(active_factors().values(), key=lambda f: f.category)
    return jsonify({"success": True, "factors": [factor.to_dict() for factor in rows]}), 200


@main_bp.route("/profile", methods=["GET"])
@login_required
def profile():
    user = db.session.get(User, current_actor().user_id)
    if user is None:
        return error("User not found", 404)
    return jsonify({"success": True, "user": user.to_dict(), "stats": user_stats(user.id)}), 200


# Update email or password, selected by the "action" field.
@main_bp.route("/profile", methods=["POST"])
@login_required
def update_profile():
    user = db.session.get(User, current_actor().user_id)
    if user is None:
        return error("User not found", 404)

    payload = json_payload() if request.is_json else request.form
    action = payload.get("action")

    if action == "update_email":
        form = load_form(ProfileEmailForm)
        if not form.validate():
            return invalid_form(form)
        email = form.email.data.strip().lower()
        # Reject emails already used by another account.
        taken = db.session.scalar(db.select(User.id).where(User.email == email, User.id != user.id))
        if taken is not None:
            return error("Email already in use by another account", 409)
        user.email = email
        db.session.commit()
        logger.info("User %s updated their email", user.username)
        return jsonify({"success": True, "message": "Email updated successfully", "user": user.to_dict()}), 200

    if action == "change_password":
        form = load_form(ChangePasswordForm)
        if not form.validate():
            return invalid_form(form)
        if not user.check_password(form.current_password.data):
            return error("Current password is incorrect", 400)
        user.set_password(form.new_password.data)
        db.session.commit()
        logger.info("User %s changed their password", user.username)
        return jsonify({"success": True, "message": "Password changed successfully"}), 200

    return error("Unknown profile action", 400)
