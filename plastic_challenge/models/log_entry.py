from plastic_challenge.extensions import db
from plastic_challenge.models.base import utc_now


class LogEntry(db.Model):
    __tablename__ = "logs"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    factor_id = db.Column(db.Integer, db.ForeignKey("environmental_factors.id"), nullable=False)

    quantity = db.Column(db.Integer, nullable=False)
    log_date = db.Column(db.Date, nullable=False, index=True)

    # Snapshotted at creation; never recomputed when factors change.
    co2_saved = db.Column(db.Numeric(12, 2), nullable=False)
    water_saved = db.Column(db.Numeric(12, 2), nullable=False)

    created_at = db.Column(db.DateTime, default=utc_now, nullable=False, index=True)

    user = db.relationship("User", back_populates="logs")
    factor = db.relationship("EnvironmentalFactor")

    __table_args__ = (db.CheckConstraint("quantity > 0", name="ck_log_quantity_positive"),)

    @property
    def category(self):
        return self.factor.category if self.factor else None

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "username": self.user.username if self.user else None,
            "category": self.category,
            "quantity": self.quantity,
            "log_date": self.log_date.isoformat(),
            "co2_saved": self.co2_saved,
            "water_saved": self.water_saved,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
