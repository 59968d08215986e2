import logging
from datetime import date
from decimal import Decimal, InvalidOperation

from flask import current_app

from plastic_challenge.awards import award_eligible
from plastic_challenge.extensions import db
from plastic_challenge.impact import active_factors, calculate_impact
from plastic_challenge.models import LogEntry
from plastic_challenge.models.environmental_factor import CATEGORIES

logger = logging.getLogger(__name__)


def _newest_first(stmt):
    return stmt.order_by(LogEntry.log_date.desc(), LogEntry.created_at.desc(), LogEntry.id.desc())


def _whole_number(value):
    # Fractional quantities are rejected, not truncated.
    try:
        parsed = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValueError("Quantity must be a whole number.")
    if isinstance(value, bool) or not parsed.is_finite() or parsed != parsed.to_integral_value():
        raise ValueError("Quantity must be a whole number.")
    return int(parsed)


def record_log_entry(actor, category, quantity, log_date=None):
    """Store a plastic-avoidance entry and grant any certificates it unlocks.

    Returns the new ``LogEntry`` and the list of awards granted as a result.
    Raises ``ValueError`` for submissions that must not be stored.
    """
    if category not in CATEGORIES:
        raise ValueError("Invalid item category selected.")

    max_quantity = current_app.config.get("MAX_LOG_QUANTITY", 1000)
    quantity = _whole_number(quantity)
    if quantity < 1 or quantity > max_quantity:
        raise ValueError(f"Quantity must be between 1 and {max_quantity}.")

    log_date = log_date or date.today()
    if log_date > date.today():
        raise ValueError("Date cannot be in the future.")

    factor = active_factors().get(category)
    if factor is None:
        raise ValueError(f"No environmental factor configured for {category}.")

    impact = calculate_impact({category: factor}, category, quantity)
    entry = LogEntry(
        user_id=actor.user_id,
        factor=factor,
        quantity=quantity,
        log_date=log_date,
        co2_saved=impact.co2,
        water_saved=impact.water,
    )
    db.session.add(entry)
    db.session.commit()
    logger.info("User %s logged %s %s item(s) for %s", actor.user_id, quantity, category, log_date)

    awards = award_eligible(actor.user_id)
    return entry, awards


def recent_logs(user_id, limit=10):
    return db.session.execute(
        _newest_first(db.select(LogEntry).where(LogEntry.user_id == user_id)).limit(limit)
    ).scalars().all()


def all_logs():
    return db.session.execute(_newest_first(db.select(LogEntry))).scalars().all()


def paginate_logs(page=1, per_page=None):
    per_page = per_page or current_app.config.get("LOGS_PER_PAGE", 20)
    return db.paginate(_newest_first(db.select(LogEntry)), page=page, per_page=per_page, error_out=False)


def delete_log(log_id):
    entry = db.session.get(LogEntry, log_id)
    if entry is None:
        return False
    db.session.delete(entry)
    db.session.commit()
    logger.info("Log entry %s deleted", log_id)
    return True
