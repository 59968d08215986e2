from sqlalchemy import text

from plastic_challenge.extensions import db
from plastic_challenge.models.base import utc_now

CATEGORIES = ("bottle", "bag", "container")


class EnvironmentalFactor(db.Model):
    """Per-unit savings for one item category.

    CO2 is stored in grams and water in litres. Older rows are kept inactive
    when a factor is replaced so that existing logs still point at the values
    they were computed with.
    """

    __tablename__ = "environmental_factors"

    id = db.Column(db.Integer, primary_key=True)
    category = db.Column(db.String(20), nullable=False, index=True)
    co2_per_unit = db.Column(db.Numeric(10, 2), nullable=False)
    water_per_unit = db.Column(db.Numeric(10, 2), nullable=False)
    source = db.Column(db.String(255), nullable=False, default="")
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime, default=utc_now, nullable=False)

    __table_args__ = (
        db.CheckConstraint("category IN ('bottle', 'bag', 'container')", name="ck_factor_category"),
        db.CheckConstraint("co2_per_unit >= 0", name="ck_factor_co2_nonneg"),
        db.CheckConstraint("water_per_unit >= 0", name="ck_factor_water_nonneg"),
        # One active factor per category.
        db.Index(
            "uq_factor_active_category",
            "category",
            unique=True,
            sqlite_where=text("is_active = 1"),
            postgresql_where=text("is_active"),
        ),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "category": self.category,
            "co2_per_unit": self.co2_per_unit,
            "water_per_unit": self.water_per_unit,
            "source": self.source,
            "is_active": self.is_active,
        }
