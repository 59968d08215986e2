from sqlalchemy import func

from plastic_challenge.extensions import db
from plastic_challenge.models import LogEntry, User


def _sum(column):
    return func.coalesce(func.sum(column), 0)


def user_stats(user_id):
    row = db.session.execute(
        db.select(
            func.count(LogEntry.id),
            _sum(LogEntry.quantity),
            _sum(LogEntry.co2_saved),
            _sum(LogEntry.water_saved),
            func.min(LogEntry.log_date),
        ).where(LogEntry.user_id == user_id)
    ).one()
    return {
        "total_entries": row[0],
        "total_items": int(row[1]),
        "total_co2": row[2],
        "total_water": row[3],
        "first_entry": row[4].isoformat() if row[4] else None,
    }


def community_stats():
    row = db.session.execute(
        db.select(
            func.count(func.distinct(LogEntry.user_id)),
            func.count(LogEntry.id),
            _sum(LogEntry.quantity),
            _sum(LogEntry.co2_saved),
            _sum(LogEntry.water_saved),
        )
    ).one()
    return {
        "total_participants": row[0],
        "total_logs": row[1],
        "total_items": int(row[2]),
        "total_co2": row[3],
        "total_water": row[4],
    }


def users_with_totals():
    """Every user with their log totals, highest item count first."""
    rows = db.session.execute(
        db.select(
            User,
            func.count(LogEntry.id).label("entries"),
            _sum(LogEntry.quantity).label("items"),
            _sum(LogEntry.co2_saved).label("co2"),
            _sum(LogEntry.water_saved).label("water"),
        )
        .outerjoin(LogEntry, LogEntry.user_id == User.id)
        .group_by(User.id)
        .order_by(_sum(LogEntry.quantity).desc(), User.id)
    ).all()
    return [
        {
            "user": user,
            "total_entries": entries,
            "total_items": int(items),
            "total_co2": co2,
            "total_water": water,
        }
        for user, entries, items, co2, water in rows
    ]


def leaderboard(limit=10):
    rows = db.session.execute(
        db.select(
            User.id,
            User.username,
            func.sum(LogEntry.quantity).label("items"),
            func.sum(LogEntry.co2_saved).label("co2"),
            func.sum(LogEntry.water_saved).label("water"),
        )
        .join(LogEntry, LogEntry.user_id == User.id)
        .group_by(User.id, User.username)
        .order_by(func.sum(LogEntry.quantity).desc(), User.id)
        .limit(limit)
    ).all()
    return [
        {"user_id": uid, "username": username, "total_items": int(items), "total_co2": co2, "total_water": water}
        for uid, username, items, co2, water in rows
    ]


def user_count():
    return db.session.scalar(db.select(func.count(User.id)))
