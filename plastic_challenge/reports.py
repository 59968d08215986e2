"""CSV report builders for the admin reports page.

Each builder returns ``(filename, csv_text)``; the route wraps the text in a
``text/csv`` response. The user and log reports start with a UTF-8 byte
order mark so spreadsheet tools pick the right encoding.
"""
import csv
import io
import logging
from datetime import date, datetime
from decimal import Decimal

from plastic_challenge.logs import all_logs
from plastic_challenge.stats import community_stats, users_with_totals

logger = logging.getLogger(__name__)

BOM = "\ufeff"

USER_HEADERS = [
    "User ID", "Username", "Email", "Role", "Status", "Entries Count",
    "Items Saved", "CO2 Saved (g)", "Water Saved (L)", "Join Date",
]
LOG_HEADERS = [
    "Log ID", "Username", "Item Category", "Quantity", "CO2 Saved (g)",
    "Water Saved (L)", "Activity Date", "System Recorded At",
]


def _money(value):
    return f"{Decimal(value or 0):.2f}"


def _stamp(value):
    return value.strftime("%Y-%m-%d %H:%M:%S") if value else ""


def _write(rows, bom=False):
    buffer = io.StringIO()
    if bom:
        buffer.write(BOM)
    writer = csv.writer(buffer)
    writer.writerows(rows)
    return buffer.getvalue()


def users_report(today=None):
    today = today or date.today()
    rows = [USER_HEADERS]
    for entry in users_with_totals():
        user = entry["user"]
        rows.append([
            user.id,
            user.username,
            user.email,
            user.role,
            user.status,
            entry["total_entries"],
            entry["total_items"],
            _money(entry["total_co2"]),
            _money(entry["total_water"]),
            _stamp(user.created_at),
        ])
    return f"users_summary_{today.isoformat()}.csv", _write(rows, bom=True)


def logs_report(today=None):
    today = today or date.today()
    rows = [LOG_HEADERS]
    for log in all_logs():
        rows.append([
            log.id,
            log.user.username,
            log.category,
            log.quantity,
            _money(log.co2_saved),
            _money(log.water_saved),
            log.log_date.isoformat(),
            _stamp(log.created_at),
        ])
    return f"detailed_logs_{today.isoformat()}.csv", _write(rows, bom=True)


def statistics_report(today=None, now=None):
    today = today or date.today()
    now = now or datetime.now()
    stats = community_stats()
    rows = [
        ["COMMUNITY IMPACT REPORT"],
        ["Generated On", now.strftime("%Y-%m-%d %H:%M:%S")],
        [],
        ["Metric Description", "Value"],
        ["Total Active Participants", stats["total_participants"]],
        ["Total Logs Submitted", stats["total_logs"]],
        ["Total Plastic Items Saved", stats["total_items"]],
        ["Total CO2 Reduced (g)", _money(stats["total_co2"])],
        ["Total Water Saved (L)", _money(stats["total_water"])],
    ]
    return f"community_stats_{today.isoformat()}.csv", _write(rows)


REPORT_BUILDERS = {
    "users": users_report,
    "logs": logs_report,
    "statistics": statistics_report,
}


def build_report(report_type):
    builder = REPORT_BUILDERS.get(report_type)
    if builder is None:
        raise ValueError("Invalid report type")
    filename, content = builder()
    logger.info("Generated %s report %s", report_type, filename)
    return filename, content
