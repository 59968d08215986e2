from decimal import Decimal

import pytest

from plastic_challenge import create_app
from plastic_challenge.authenticate import Actor
from plastic_challenge.config import TestingConfig
from plastic_challenge.extensions import db
from plastic_challenge.models import CertificateDefinition, EnvironmentalFactor, User
from plastic_challenge.models.user import ROLE_ADMIN, ROLE_PARTICIPANT

PASSWORD = "secret123"


@pytest.fixture
def app(tmp_path, monkeypatch):
    monkeypatch.setattr(TestingConfig, "SQLALCHEMY_DATABASE_URI", f"sqlite:///{tmp_path / 'test.db'}")
    app = create_app("testing")
    with app.app_context():
        db.create_all()
        for category, co2, water in (("bottle", "10", "25"), ("bag", "5", "1"), ("container", "20.50", "3.25")):
            db.session.add(
                EnvironmentalFactor(category=category, co2_per_unit=Decimal(co2), water_per_unit=Decimal(water))
            )
        db.session.commit()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def make_user(username, role=ROLE_PARTICIPANT, password=PASSWORD):
    user = User(username=username, email=f"{username}@campus.org", role=role)
    user.set_password(password)
    db.session.add(user)
    db.session.commit()
    return user


def make_certificate(name, value=0, criteria_type="auto"):
    certificate = CertificateDefinition(
        name=name,
        description=f"{name} certificate",
        criteria_type=criteria_type,
        criteria_value=value,
        design_style="bronze",
    )
    db.session.add(certificate)
    db.session.commit()
    return certificate


def login(client, username, password=PASSWORD):
    return client.post("/login", json={"login": username, "password": password})


@pytest.fixture
def user(app):
    return make_user("alice")


@pytest.fixture
def admin(app):
    return make_user("root", role=ROLE_ADMIN)


@pytest.fixture
def actor(user):
    return Actor(user_id=user.id, role=user.role, username=user.username)


@pytest.fixture
def admin_actor(admin):
    return Actor(user_id=admin.id, role=admin.role, username=admin.username)
