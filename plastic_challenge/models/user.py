from werkzeug.security import check_password_hash, generate_password_hash

from plastic_challenge.extensions import db
from plastic_challenge.models.base import utc_now

ROLE_PARTICIPANT = "participant"
ROLE_ADMIN = "admin"
ROLES = (ROLE_PARTICIPANT, ROLE_ADMIN)

STATUS_ACTIVE = "active"
STATUS_INACTIVE = "inactive"
STATUSES = (STATUS_ACTIVE, STATUS_INACTIVE)


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(50), unique=True, nullable=False, index=True)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)

    role = db.Column(db.String(20), nullable=False, default=ROLE_PARTICIPANT)
    status = db.Column(db.String(20), nullable=False, default=STATUS_ACTIVE)

    created_at = db.Column(db.DateTime, default=utc_now, nullable=False)
    last_login = db.Column(db.DateTime, nullable=True)

    logs = db.relationship("LogEntry", back_populates="user", cascade="all, delete-orphan")
    awards = db.relationship(
        "CertificateAward",
        back_populates="user",
        foreign_keys="CertificateAward.user_id",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        db.CheckConstraint("role IN ('participant', 'admin')", name="ck_user_role"),
        db.CheckConstraint("status IN ('active', 'inactive')", name="ck_user_status"),
    )

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)

    @property
    def is_admin(self):
        return self.role == ROLE_ADMIN

    @property
    def is_active(self):
        return self.status == STATUS_ACTIVE

    def to_dict(self):
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "role": self.role,
            "status": self.status,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "last_login": self.last_login.isoformat() if self.last_login else None,
        }

    def __repr__(self):
        return f"<User {self.username}>"
