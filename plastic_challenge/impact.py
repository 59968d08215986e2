"""Environmental impact calculation.

Per-unit savings come from the active ``EnvironmentalFactor`` of each item
category. ``calculate_impact`` itself is pure so it can run against any
mapping of category to factor, including plain objects in tests.
"""
import logging
from decimal import Decimal
from typing import Mapping, NamedTuple

from plastic_challenge.extensions import db
from plastic_challenge.models import EnvironmentalFactor
from plastic_challenge.models.environmental_factor import CATEGORIES

logger = logging.getLogger(__name__)

ZERO = Decimal("0")

# Defaults used by `flask init-db`; CO2 in grams, water in litres per item.
DEFAULT_FACTORS = {
    "bottle": (Decimal("82.80"), Decimal("3.00"), "Pacific Institute bottled water life-cycle estimate"),
    "bag": (Decimal("33.00"), Decimal("0.50"), "UK Environment Agency carrier bag life-cycle assessment"),
    "container": (Decimal("120.00"), Decimal("2.00"), "US EPA WARM model, PET/PP food containers"),
}


class Impact(NamedTuple):
    co2: Decimal
    water: Decimal


def _as_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # Go through str so floats keep their printed value.
    return Decimal(str(value))


def calculate_impact(factors: Mapping, category: str, quantity: int) -> Impact:
    """Return the CO2 (g) and water (L) saved by ``quantity`` items.

    An unknown category yields zero savings; callers must reject such
    submissions before they are stored.
    """
    factor = factors.get(category)
    if factor is None:
        return Impact(ZERO, ZERO)
    return Impact(
        _as_decimal(factor.co2_per_unit) * quantity,
        _as_decimal(factor.water_per_unit) * quantity,
    )


def active_factors() -> dict:
    rows = db.session.execute(
        db.select(EnvironmentalFactor).where(EnvironmentalFactor.is_active.is_(True))
    ).scalars()
    return {factor.category: factor for factor in rows}


def set_factor(category: str, co2_per_unit, water_per_unit, source: str = "") -> EnvironmentalFactor:
    """Replace the active factor for a category.

    The previous factor is deactivated rather than edited, so log entries
    keep the savings they were recorded with.
    """
    if category not in CATEGORIES:
        raise ValueError(f"Unknown item category: {category}")
    co2 = _as_decimal(co2_per_unit)
    water = _as_decimal(water_per_unit)
    if co2 < 0 or water < 0:
        raise ValueError("Savings per unit cannot be negative")

    current = active_factors().get(category)
    if current is not None:
        current.is_active = False
        # Flush first so the partial unique index never sees two active rows.
        db.session.flush()

    factor = EnvironmentalFactor(
        category=category,
        co2_per_unit=co2,
        water_per_unit=water,
        source=source or "",
        is_active=True,
    )
    db.session.add(factor)
    db.session.commit()
    logger.info("Environmental factor for %s set to co2=%s water=%s", category, co2, water)
    return factor


def seed_default_factors() -> int:
    """Create the default factors for categories that have none; return how many were added."""
    existing = active_factors()
    added = 0
    for category, (co2, water, source) in DEFAULT_FACTORS.items():
        if category in existing:
            continue
        db.session.add(
            EnvironmentalFactor(category=category, co2_per_unit=co2, water_per_unit=water, source=source)
        )
        added += 1
    db.session.commit()
    return added
