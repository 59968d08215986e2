"""Certificate awarding.

Automatic certificates are granted by ``award_eligible`` whenever a user's
cumulative item count reaches their threshold. Administrators grant manual
certificates (or any certificate early) through ``award_certificate``.

Both paths rely on the unique ``(user_id, certificate_id)`` constraint on
``user_certificates``: the automatic path treats a violation as "already
awarded" and moves on, the manual path reports it as ``DuplicateAwardError``.
"""
import logging
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from plastic_challenge.extensions import db
from plastic_challenge.models import CertificateAward, CertificateDefinition, LogEntry, User
from plastic_challenge.models.certificate import CRITERIA_AUTO

logger = logging.getLogger(__name__)


class DuplicateAwardError(Exception):
    """The user already holds the certificate."""


def total_items(user_id: int) -> int:
    total = db.session.scalar(
        db.select(func.coalesce(func.sum(LogEntry.quantity), 0)).where(LogEntry.user_id == user_id)
    )
    return int(total or 0)


def holds_certificate(user_id: int, certificate_id: int) -> bool:
    return db.session.scalar(
        db.select(CertificateAward.id).where(
            CertificateAward.user_id == user_id,
            CertificateAward.certificate_id == certificate_id,
        )
    ) is not None


def _eligible_certificates(user_id: int, items: int) -> List[CertificateDefinition]:
    held = db.select(CertificateAward.id).where(
        CertificateAward.user_id == user_id,
        CertificateAward.certificate_id == CertificateDefinition.id,
    )
    return db.session.execute(
        db.select(CertificateDefinition)
        .where(
            CertificateDefinition.criteria_type == CRITERIA_AUTO,
            CertificateDefinition.criteria_value <= items,
            ~held.exists(),
        )
        .order_by(CertificateDefinition.criteria_value, CertificateDefinition.id)
    ).scalars().all()


def award_eligible(user_id: int) -> List[CertificateAward]:
    """Grant every automatic certificate the user now qualifies for.

    Each award is committed on its own. If a concurrent request awarded the
    same certificate first, that insert is rolled back and skipped while the
    remaining certificates are still granted. Calling this again without new
    log entries grants nothing.
    """
    if db.session.get(User, user_id) is None:
        raise LookupError(f"User {user_id} not found")

    items = total_items(user_id)
    pending = [(c.id, c.name) for c in _eligible_certificates(user_id, items)]

    granted = []
    for certificate_id, name in pending:
        award = CertificateAward(user_id=user_id, certificate_id=certificate_id, awarded_by_user_id=None)
        db.session.add(award)
        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            if not holds_certificate(user_id, certificate_id):
                raise
            logger.warning("Certificate %r already awarded to user %s, skipping", name, user_id)
            continue
        logger.info("Certificate %r automatically awarded to user %s (%s items)", name, user_id, items)
        granted.append(award)
    return granted


def award_certificate(actor, user_id: int, certificate_id: int, message: Optional[str] = None) -> CertificateAward:
    """Manually award a certificate on behalf of an administrator."""
    if actor is None or not actor.is_admin:
        raise PermissionError("Only administrators can award certificates")
    if db.session.get(User, user_id) is None:
        raise LookupError("User not found")
    certificate = db.session.get(CertificateDefinition, certificate_id)
    if certificate is None:
        raise LookupError("Certificate not found")

    award = CertificateAward(
        user_id=user_id,
        certificate_id=certificate_id,
        awarded_by_user_id=actor.user_id,
        personal_message=(message or "").strip() or None,
    )
    db.session.add(award)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        if holds_certificate(user_id, certificate_id):
            logger.warning(
                "Admin %s tried to award %r to user %s who already holds it",
                actor.user_id, certificate.name, user_id,
            )
            raise DuplicateAwardError("The selected user already has this certificate.")
        raise
    logger.info("Certificate %r awarded to user %s by admin %s", certificate.name, user_id, actor.user_id)
    return award


def revoke_award(award_id: int) -> bool:
    award = db.session.get(CertificateAward, award_id)
    if award is None:
        return False
    user_id, certificate_id = award.user_id, award.certificate_id
    db.session.delete(award)
    db.session.commit()
    logger.info("Certificate %s revoked from user %s", certificate_id, user_id)
    return True


def user_certificates(user_id: int) -> List[CertificateAward]:
    return db.session.execute(
        db.select(CertificateAward)
        .where(CertificateAward.user_id == user_id)
        .order_by(CertificateAward.awarded_at.desc(), CertificateAward.id.desc())
    ).scalars().all()


def recent_awards(limit: int = 20) -> List[CertificateAward]:
    return db.session.execute(
        db.select(CertificateAward)
        .order_by(CertificateAward.awarded_at.desc(), CertificateAward.id.desc())
        .limit(limit)
    ).scalars().all()
