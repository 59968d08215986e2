from plastic_challenge.extensions import db
from plastic_challenge.models.base import utc_now

CRITERIA_MANUAL = "manual"
CRITERIA_AUTO = "auto"
CRITERIA_TYPES = (CRITERIA_MANUAL, CRITERIA_AUTO)

SYSTEM_ACTOR_NAME = "System"


class CertificateDefinition(db.Model):
    __tablename__ = "certificates"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    description = db.Column(db.Text, nullable=False)
    criteria_type = db.Column(db.String(10), nullable=False, default=CRITERIA_MANUAL)
    # Minimum cumulative items for auto certificates.
    criteria_value = db.Column(db.Integer, nullable=False, default=0)
    design_style = db.Column(db.String(50), nullable=False)
    created_at = db.Column(db.DateTime, default=utc_now, nullable=False)

    awards = db.relationship("CertificateAward", back_populates="certificate", cascade="all, delete-orphan")

    __table_args__ = (
        db.CheckConstraint(
            "(criteria_type = 'manual' AND criteria_value = 0) "
            "OR (criteria_type = 'auto' AND criteria_value > 0)",
            name="ck_certificate_criteria",
        ),
    )

    @property
    def is_auto(self):
        return self.criteria_type == CRITERIA_AUTO

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "criteria_type": self.criteria_type,
            "criteria_value": self.criteria_value,
            "design_style": self.design_style,
        }


class CertificateAward(db.Model):
    __tablename__ = "user_certificates"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    certificate_id = db.Column(db.Integer, db.ForeignKey("certificates.id", ondelete="CASCADE"), nullable=False)
    # NULL marks a system-issued (automatic) award.
    awarded_by_user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    personal_message = db.Column(db.Text, nullable=True)
    awarded_at = db.Column(db.DateTime, default=utc_now, nullable=False)

    user = db.relationship("User", foreign_keys=[user_id], back_populates="awards")
    certificate = db.relationship("CertificateDefinition", back_populates="awards")
    awarded_by = db.relationship("User", foreign_keys=[awarded_by_user_id])

    __table_args__ = (
        db.UniqueConstraint("user_id", "certificate_id", name="uq_user_certificate"),
        db.Index("ix_user_certificates_user_id", "user_id"),
        db.Index("ix_user_certificates_awarded_at", "awarded_at"),
    )

    @property
    def is_system_award(self):
        return self.awarded_by_user_id is None

    @property
    def awarded_by_name(self):
        if self.awarded_by is None:
            return SYSTEM_ACTOR_NAME
        return self.awarded_by.username

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "username": self.user.username if self.user else None,
            "certificate": self.certificate.to_dict() if self.certificate else None,
            "awarded_by": self.awarded_by_name,
            "personal_message": self.personal_message,
            "awarded_at": self.awarded_at.isoformat() if self.awarded_at else None,
        }
