import click
from sqlalchemy import or_

from plastic_challenge.certificates import seed_default_certificates
from plastic_challenge.extensions import db
from plastic_challenge.impact import seed_default_factors
from plastic_challenge.models import User
from plastic_challenge.models.user import ROLE_ADMIN, STATUS_ACTIVE


def register_cli(app):
    @app.cli.command("init-db")
    def init_db():
        """Create tables and seed default factors and certificates."""
        db.create_all()
        factors = seed_default_factors()
        certificates = seed_default_certificates()
        click.echo(f"Database initialised ({factors} factors, {certificates} certificates added).")

    @app.cli.command("create-admin")
    @click.argument("username")
    @click.argument("email")
    @click.password_option()
    def create_admin(username, email, password):
        """Create an administrator account."""
        email = email.strip().lower()
        exists = db.session.scalar(db.select(User.id).where(or_(User.username == username, User.email == email)))
        if exists is not None:
            raise click.ClickException("Username or email already exists")
        if len(password) < 6:
            raise click.ClickException("Password must be at least 6 characters")

        user = User(username=username, email=email, role=ROLE_ADMIN, status=STATUS_ACTIVE)
        user.set_password(password)
        db.session.add(user)
        db.session.commit()
        click.echo(f"Admin {username} created.")
