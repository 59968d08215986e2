import logging
from decimal import Decimal

# Import Flask routing utilities for admin pages.
from flask import Blueprint, Response, current_app, jsonify, request

# Import admin guard, domain services and form schemas.
from plastic_challenge.authenticate import admin_required, current_actor
from plastic_challenge.awards import DuplicateAwardError, award_certificate, recent_awards, revoke_award
from plastic_challenge.certificates import create_certificate, delete_certificate, list_certificates
from plastic_challenge.extensions import db
from plastic_challenge.forms import AwardForm, CertificateForm, FactorForm, ReportForm, UserStatusForm
from plastic_challenge.impact import active_factors, set_factor
from plastic_challenge.logs import delete_log, paginate_logs
from plastic_challenge.models import User
from plastic_challenge.reports import build_report
from plastic_challenge.routes import error, invalid_form, load_form
from plastic_challenge.stats import community_stats, user_count, users_with_totals

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")

# This Blueprint groups admin dashboard and management routes.
admin_bp = Blueprint("admin", __name__, url_prefix="/admin")


@admin_bp.route("/")
@admin_required
def dashboard():
    latest = paginate_logs(page=1, per_page=10)
    return jsonify({
        "success": True,
        "user_count": user_count(),
        "community": community_stats(),
        "recent_logs": [log.to_dict() for log in latest.items],
    }), 200


# List every account with its logging totals.
@admin_bp.route("/users")
@admin_required
def users():
    rows = []
    for entry in users_with_totals():
        data = entry["user"].to_dict()
        data.update({k: v for k, v in entry.items() if k != "user"})
        rows.append(data)
    return jsonify({"success": True, "users": rows}), 200


@admin_bp.route("/users/<int:user_id>/status", methods=["POST"])
@admin_required
def update_user_status(user_id):
    form = load_form(UserStatusForm)
    if not form.validate():
        return invalid_form(form)

    user = db.session.get(User, user_id)
    if user is None:
        return error("User not found", 404)
    # Admins cannot lock themselves out.
    if user.id == current_actor().user_id:
        return error("You cannot change your own status", 400)

    user.status = form.status.data
    db.session.commit()
    logger.info("User %s status set to %s by admin %s", user.username, user.status, current_actor().user_id)
    return jsonify({"success": True, "message": "User status updated successfully!", "user": user.to_dict()}), 200


@admin_bp.route("/logs")
@admin_required
def logs():
    page = max(request.args.get("page", 1, type=int), 1)
    pagination = paginate_logs(page=page)
    return jsonify({
        "success": True,
        "logs": [log.to_dict() for log in pagination.items],
        "page": pagination.page,
        "pages": pagination.pages,
        "total": pagination.total,
    }), 200


@admin_bp.route("/logs/<int:log_id>/delete", methods=["POST"])
@admin_required
def remove_log(log_id):
    if not delete_log(log_id):
        return error("Log entry not found", 404)
    return jsonify({"success": True, "message": "Log entry deleted successfully!"}), 200


@admin_bp.route("/certificates")
@admin_required
def certificates():
    limit = current_app.config["RECENT_AWARDS_LIMIT"]
    people = db.session.execute(db.select(User).order_by(User.username)).scalars()
    return jsonify({
        "success": True,
        "certificates": [cert.to_dict() for cert in list_certificates()],
        "recent_awards": [award.to_dict() for award in recent_awards(limit)],
        "users": [{"id": u.id, "username": u.username} for u in people],
    }), 200


@admin_bp.route("/certificates", methods=["POST"])
@admin_required
def create_certificate_route():
    form = load_form(CertificateForm)
    if not form.validate():
        return invalid_form(form)
    try:
        certificate = create_certificate(
            form.name.data,
            form.description.data,
            form.criteria_type.data,
            form.criteria_value.data,
            form.design_style.data,
        )
    except ValueError as exc:
        return error(str(exc), 400)
    return jsonify({
        "success": True,
        "message": "New certificate created successfully!",
        "certificate": certificate.to_dict(),
    }), 201


@admin_bp.route("/certificates/<int:certificate_id>/delete", methods=["POST"])
@admin_required
def delete_certificate_route(certificate_id):
    name = delete_certificate(certificate_id)
    if name is None:
        return error("Certificate not found", 404)
    return jsonify({"success": True, "message": f'Certificate "{name}" deleted successfully!'}), 200


@admin_bp.route("/certificates/award", methods=["POST"])
@admin_required
def award():
    form = load_form(AwardForm)
    if not form.validate():
        return invalid_form(form)
    try:
        granted = award_certificate(
            current_actor(),
            form.user_id.data,
            form.certificate_id.data,
            form.personal_message.data,
        )
    except LookupError as exc:
        return error(str(exc), 404)
    except DuplicateAwardError as exc:
        return error(str(exc), 409)
    return jsonify({"success": True, "message": "Certificate awarded successfully!", "award": granted.to_dict()}), 201


@admin_bp.route("/awards/<int:award_id>/revoke", methods=["POST"])
@admin_required
def revoke(award_id):
    if not revoke_award(award_id):
        return error("Award not found", 404)
    return jsonify({"success": True, "message": "Certificate revoked successfully!"}), 200


@admin_bp.route("/factors")
@admin_required
def factors():
    rows = sorted(active_factors().values(), key=lambda f: f.category)
    return jsonify({"success": True, "factors": [factor.to_dict() for factor in rows]}), 200


# Replace the active factor for a category; existing logs keep their values.
@admin_bp.route("/factors", methods=["POST"])
@admin_required
def update_factor():
    form = load_form(FactorForm)
    if not form.validate():
        return invalid_form(form)
    try:
        factor = set_factor(
            form.category.data,
            form.co2_per_unit.data.quantize(CENT),
            form.water_per_unit.data.quantize(CENT),
            form.source.data or "",
        )
    except ValueError as exc:
        return error(str(exc), 400)
    return jsonify({"success": True, "factor": factor.to_dict()}), 201


# Stream a CSV report as a file download.
@admin_bp.route("/reports", methods=["POST"])
@admin_required
def reports():
    form = load_form(ReportForm)
    if not form.validate():
        return invalid_form(form)
    filename, content = build_report(form.report_type.data)
    return Response(
        content,
        mimetype="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )
