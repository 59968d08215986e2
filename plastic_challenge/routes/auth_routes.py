import logging

# Import Flask routing and session utilities.
from flask import Blueprint, jsonify
from sqlalchemy import or_

# Import DB access, user model and session helpers.
from plastic_challenge.authenticate import login_user, logout_user
from plastic_challenge.extensions import db
from plastic_challenge.forms import LoginForm, RegisterForm
from plastic_challenge.models import User
from plastic_challenge.models.base import utc_now
from plastic_challenge.models.user import ROLE_PARTICIPANT, STATUS_ACTIVE
from plastic_challenge.routes import error, invalid_form, load_form

logger = logging.getLogger(__name__)

# This Blueprint groups account registration and login routes.
auth_bp = Blueprint("auth", __name__)


# Create a participant account and start a session for it.
@auth_bp.route("/register", methods=["POST"])
def register():
    form = load_form(RegisterForm)
    if not form.validate():
        return invalid_form(form)

    # Normalize input for uniqueness checks and storage.
    username = form.username.data.strip()
    email = form.email.data.strip().lower()

    if db.session.scalar(db.select(User.id).where(User.username == username)) is not None:
        return error("Username already exists", 409)
    if db.session.scalar(db.select(User.id).where(User.email == email)) is not None:
        return error("Email already registered", 409)

    user = User(username=username, email=email, role=ROLE_PARTICIPANT, status=STATUS_ACTIVE)
    user.set_password(form.password.data)
    db.session.add(user)
    db.session.commit()
    logger.info("New participant registered: %s", username)

    login_user(user)
    return jsonify({"success": True, "message": "Registration successful", "user": user.to_dict()}), 201


# Authenticate by username or email.
@auth_bp.route("/login", methods=["POST"])
def login():
    form = load_form(LoginForm)
    if not form.validate():
        return invalid_form(form)

    identifier = form.login.data.strip()
    # Query for user by username or email.
    user = db.session.scalar(
        db.select(User).where(or_(User.username == identifier, User.email == identifier.lower()))
    )

    # Validate credentials before issuing a session.
    if user is None or not user.check_password(form.password.data):
        logger.warning("Failed login attempt for %r", identifier)
        return error("Invalid username or password", 401)
    if not user.is_active:
        logger.warning("Login refused for inactive account %s", user.username)
        return error("Your account has been deactivated", 403)

    user.last_login = utc_now()
    db.session.commit()
    login_user(user)
    logger.info("User %s logged in", user.username)
    return jsonify({"success": True, "user": user.to_dict()}), 200


# Clear the session.
@auth_bp.route("/logout", methods=["POST"])
def logout():
    logout_user()
    return jsonify({"success": True}), 200
