from datetime import date, timedelta
from decimal import Decimal

import pytest

from conftest import make_user
from plastic_challenge.authenticate import Actor
from plastic_challenge.logs import delete_log, paginate_logs, recent_logs, record_log_entry
from plastic_challenge.stats import community_stats, leaderboard, user_count, user_stats, users_with_totals


def _actor(user):
    return Actor(user_id=user.id, role=user.role, username=user.username)


def test_user_stats_totals(app, actor):
    earlier = date.today() - timedelta(days=3)
    record_log_entry(actor, "bottle", 5, earlier)
    record_log_entry(actor, "bag", 2, date.today())

    stats = user_stats(actor.user_id)

    assert stats["total_entries"] == 2
    assert stats["total_items"] == 7
    assert stats["total_co2"] == Decimal("60")
    assert stats["total_water"] == Decimal("127")
    assert stats["first_entry"] == earlier.isoformat()


def test_user_stats_without_logs(app, actor):
    stats = user_stats(actor.user_id)
    assert stats["total_entries"] == 0
    assert stats["total_items"] == 0
    assert stats["first_entry"] is None


def test_community_stats_and_leaderboard(app, user):
    bob = make_user("bob")
    make_user("carol")
    record_log_entry(_actor(user), "bottle", 3, date.today())
    record_log_entry(_actor(bob), "bottle", 4, date.today())
    record_log_entry(_actor(bob), "bag", 4, date.today())

    stats = community_stats()
    assert stats["total_participants"] == 2
    assert stats["total_logs"] == 3
    assert stats["total_items"] == 11

    board = leaderboard(10)
    assert [row["username"] for row in board] == ["bob", "alice"]
    assert board[0]["total_items"] == 8
    assert leaderboard(1)[0]["username"] == "bob"

    assert user_count() == 3
    totals = {row["user"].username: row["total_items"] for row in users_with_totals()}
    assert totals == {"bob": 8, "alice": 3, "carol": 0}


def test_log_listing_order_and_pagination(app, actor):
    for days in range(3):
        record_log_entry(actor, "bag", 1, date.today() - timedelta(days=days))

    logs = recent_logs(actor.user_id, limit=2)
    assert [log.log_date for log in logs] == [date.today(), date.today() - timedelta(days=1)]

    page = paginate_logs(page=2, per_page=2)
    assert page.total == 3
    assert len(page.items) == 1


def test_delete_log(app, actor):
    entry, _ = record_log_entry(actor, "bag", 1, date.today())
    assert delete_log(entry.id) is True
    assert delete_log(entry.id) is False
    assert recent_logs(actor.user_id) == []


def test_record_log_entry_rejects_fractional_quantity(app, actor):
    with pytest.raises(ValueError):
        record_log_entry(actor, "bottle", 5.7, date.today())
    with pytest.raises(ValueError):
        record_log_entry(actor, "bottle", "2.5", date.today())

    entry, _ = record_log_entry(actor, "bottle", 4.0, date.today())
    assert entry.quantity == 4
    assert recent_logs(actor.user_id) == [entry]
