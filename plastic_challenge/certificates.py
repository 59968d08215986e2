import logging

from plastic_challenge.extensions import db
from plastic_challenge.models import CertificateDefinition
from plastic_challenge.models.certificate import CRITERIA_AUTO, CRITERIA_MANUAL, CRITERIA_TYPES

logger = logging.getLogger(__name__)

DEFAULT_CERTIFICATES = [
    {
        "name": "Plastic Pioneer",
        "description": "Avoided 10 single-use plastic items.",
        "criteria_type": CRITERIA_AUTO,
        "criteria_value": 10,
        "design_style": "bronze",
    },
    {
        "name": "Reuse Champion",
        "description": "Avoided 50 single-use plastic items.",
        "criteria_type": CRITERIA_AUTO,
        "criteria_value": 50,
        "design_style": "silver",
    },
    {
        "name": "Zero Waste Hero",
        "description": "Avoided 100 single-use plastic items.",
        "criteria_type": CRITERIA_AUTO,
        "criteria_value": 100,
        "design_style": "gold",
    },
    {
        "name": "Community Ambassador",
        "description": "Recognised by the organisers for inspiring others on campus.",
        "criteria_type": CRITERIA_MANUAL,
        "criteria_value": 0,
        "design_style": "special",
    },
]


def create_certificate(name, description, criteria_type, criteria_value, design_style):
    name = (name or "").strip()
    description = (description or "").strip()
    criteria_type = (criteria_type or "").strip()
    design_style = (design_style or "").strip()

    if not name or not description or not design_style or criteria_type not in CRITERIA_TYPES:
        raise ValueError("Please fill in all required fields and ensure the type is valid.")
    try:
        value = int(criteria_value or 0)
    except (TypeError, ValueError):
        raise ValueError("Criteria value must be a whole number.")
    if criteria_type == CRITERIA_AUTO and value <= 0:
        raise ValueError('"Auto" criteria requires a criteria value greater than 0.')
    if criteria_type == CRITERIA_MANUAL:
        # Manual certificates carry no threshold.
        value = 0

    certificate = CertificateDefinition(
        name=name,
        description=description,
        criteria_type=criteria_type,
        criteria_value=value,
        design_style=design_style,
    )
    db.session.add(certificate)
    db.session.commit()
    logger.info("Certificate %r created (%s, %s)", name, criteria_type, value)
    return certificate


def delete_certificate(certificate_id):
    """Delete a certificate and every award of it; return its name, or None if missing."""
    certificate = db.session.get(CertificateDefinition, certificate_id)
    if certificate is None:
        return None
    name = certificate.name
    db.session.delete(certificate)
    db.session.commit()
    logger.info("Certificate %r deleted", name)
    return name


def list_certificates():
    return db.session.execute(
        db.select(CertificateDefinition).order_by(CertificateDefinition.id)
    ).scalars().all()


def seed_default_certificates():
    existing = {c.name for c in list_certificates()}
    added = 0
    for defaults in DEFAULT_CERTIFICATES:
        if defaults["name"] in existing:
            continue
        db.session.add(CertificateDefinition(**defaults))
        added += 1
    db.session.commit()
    return added
