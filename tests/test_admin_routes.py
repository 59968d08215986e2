from datetime import date

from sqlalchemy import func

from conftest import login, make_certificate
from plastic_challenge.authenticate import Actor
from plastic_challenge.extensions import db
from plastic_challenge.logs import record_log_entry
from plastic_challenge.models import CertificateAward, User


def test_admin_pages_require_admin(client, user):
    assert client.get("/admin/").status_code == 401
    login(client, "alice")
    resp = client.get("/admin/")
    assert resp.status_code == 403
    assert resp.get_json()["error"] == "Admin access required"


def test_admin_dashboard(client, user, admin):
    record_log_entry(Actor(user.id, user.role), "bottle", 2, date.today())
    login(client, "root")

    data = client.get("/admin/").get_json()

    assert data["user_count"] == 2
    assert data["community"]["total_logs"] == 1
    assert data["recent_logs"][0]["username"] == "alice"


def test_toggle_user_status(client, user, admin):
    login(client, "root")

    resp = client.post(f"/admin/users/{user.id}/status", json={"status": "inactive"})
    assert resp.status_code == 200
    assert db.session.get(User, user.id).status == "inactive"

    assert client.post(f"/admin/users/{admin.id}/status", json={"status": "inactive"}).status_code == 400
    assert client.post("/admin/users/999/status", json={"status": "active"}).status_code == 404
    assert client.post(f"/admin/users/{user.id}/status", json={"status": "banned"}).status_code == 400

    users = client.get("/admin/users").get_json()["users"]
    assert {u["username"] for u in users} == {"alice", "root"}


def test_admin_logs_paginate_and_delete(client, user, admin, app):
    app.config["LOGS_PER_PAGE"] = 2
    actor = Actor(user.id, user.role)
    entries = [record_log_entry(actor, "bag", 1, date.today())[0] for _ in range(3)]
    login(client, "root")

    page = client.get("/admin/logs?page=2").get_json()
    assert page["pages"] == 2
    assert page["total"] == 3
    assert len(page["logs"]) == 1

    assert client.post(f"/admin/logs/{entries[0].id}/delete").status_code == 200
    assert client.post(f"/admin/logs/{entries[0].id}/delete").status_code == 404


def test_certificate_management(client, admin):
    login(client, "root")

    resp = client.post("/admin/certificates", json={
        "name": "Helper",
        "description": "Helped at the swap stall",
        "criteria_type": "manual",
        "criteria_value": 25,
        "design_style": "special",
    })
    assert resp.status_code == 201
    certificate = resp.get_json()["certificate"]
    assert certificate["criteria_value"] == 0

    resp = client.post("/admin/certificates", json={
        "name": "Starter",
        "description": "First steps",
        "criteria_type": "auto",
        "criteria_value": 0,
        "design_style": "bronze",
    })
    assert resp.status_code == 400

    listing = client.get("/admin/certificates").get_json()
    assert [c["name"] for c in listing["certificates"]] == ["Helper"]

    assert client.post(f"/admin/certificates/{certificate['id']}/delete").status_code == 200
    assert client.post(f"/admin/certificates/{certificate['id']}/delete").status_code == 404


def test_manual_award_and_revoke(client, user, admin):
    certificate = make_certificate("Helper", criteria_type="manual")
    login(client, "root")
    payload = {"user_id": user.id, "certificate_id": certificate.id, "personal_message": "Great work"}

    resp = client.post("/admin/certificates/award", json=payload)
    assert resp.status_code == 201
    award = resp.get_json()["award"]
    assert award["awarded_by"] == "root"

    resp = client.post("/admin/certificates/award", json=payload)
    assert resp.status_code == 409
    assert "already has this certificate" in resp.get_json()["error"]
    count = db.session.scalar(db.select(func.count(CertificateAward.id)))
    assert count == 1

    resp = client.post("/admin/certificates/award", json={"user_id": 999, "certificate_id": certificate.id})
    assert resp.status_code == 404

    recent = client.get("/admin/certificates").get_json()["recent_awards"]
    assert recent[0]["personal_message"] == "Great work"

    assert client.post(f"/admin/awards/{award['id']}/revoke").status_code == 200
    assert client.post(f"/admin/awards/{award['id']}/revoke").status_code == 404


def test_update_factor_keeps_history(client, user, admin):
    entry, _ = record_log_entry(Actor(user.id, user.role), "bottle", 1, date.today())
    login(client, "root")

    resp = client.post("/admin/factors", json={"category": "bottle", "co2_per_unit": "15.5", "water_per_unit": 30})
    assert resp.status_code == 201

    factors = {f["category"]: f for f in client.get("/admin/factors").get_json()["factors"]}
    assert float(factors["bottle"]["co2_per_unit"]) == 15.5

    db.session.refresh(entry)
    assert float(entry.co2_saved) == 10

    bad = client.post("/admin/factors", json={"category": "bottle", "co2_per_unit": -1, "water_per_unit": 1})
    assert bad.status_code == 400


def test_reports_download(client, user, admin):
    record_log_entry(Actor(user.id, user.role), "bottle", 2, date.today())
    login(client, "root")

    resp = client.post("/admin/reports", json={"report_type": "users"})
    assert resp.status_code == 200
    assert resp.mimetype == "text/csv"
    assert "users_summary_" in resp.headers["Content-Disposition"]
    assert "alice@campus.org" in resp.get_data(as_text=True)

    resp = client.post("/admin/reports", json={"report_type": "statistics"})
    assert resp.get_data(as_text=True).startswith("COMMUNITY IMPACT REPORT")

    assert client.post("/admin/reports", json={"report_type": "invoices"}).status_code == 400


def test_unknown_route_returns_json(client):
    resp = client.get("/nowhere")
    assert resp.status_code == 404
    assert resp.get_json() == {"success": False, "error": "Not found"}
