from collections import namedtuple
from datetime import date
from decimal import Decimal

import pytest

from plastic_challenge.extensions import db
from plastic_challenge.impact import DEFAULT_FACTORS, active_factors, calculate_impact, seed_default_factors, set_factor
from plastic_challenge.logs import record_log_entry
from plastic_challenge.models import EnvironmentalFactor

Factor = namedtuple("Factor", "co2_per_unit water_per_unit")


def test_calculate_impact_multiplies_factor_by_quantity():
    factors = {"bottle": Factor(Decimal("10"), Decimal("25"))}
    impact = calculate_impact(factors, "bottle", 5)
    assert impact.co2 == Decimal("50")
    assert impact.water == Decimal("125")


def test_calculate_impact_is_exact_for_fractional_factors():
    factors = {"container": Factor(Decimal("0.10"), 0.3)}
    impact = calculate_impact(factors, "container", 3)
    assert impact.co2 == Decimal("0.30")
    assert impact.water == Decimal("0.9")


def test_calculate_impact_unknown_category_is_zero():
    impact = calculate_impact({}, "straw", 4)
    assert impact.co2 == 0
    assert impact.water == 0


def test_active_factors_loads_seeded_rows(app):
    factors = active_factors()
    assert set(factors) == {"bottle", "bag", "container"}
    assert factors["container"].co2_per_unit == Decimal("20.50")


def test_set_factor_keeps_existing_logs_unchanged(app, actor):
    entry, _ = record_log_entry(actor, "bottle", 2, date.today())
    set_factor("bottle", Decimal("12.00"), Decimal("30.00"), "updated study")

    db.session.refresh(entry)
    assert entry.co2_saved == Decimal("20")
    assert entry.water_saved == Decimal("50")

    newer, _ = record_log_entry(actor, "bottle", 2, date.today())
    assert newer.co2_saved == Decimal("24")
    assert newer.factor_id != entry.factor_id

    active = db.session.execute(
        db.select(EnvironmentalFactor).where(EnvironmentalFactor.category == "bottle", EnvironmentalFactor.is_active)
    ).scalars().all()
    assert len(active) == 1


def test_set_factor_rejects_bad_input(app):
    with pytest.raises(ValueError):
        set_factor("straw", 1, 1)
    with pytest.raises(ValueError):
        set_factor("bag", -1, 1)


def test_seed_default_factors_only_fills_missing_categories(app):
    assert seed_default_factors() == 0
    assert set(DEFAULT_FACTORS) == set(active_factors())
