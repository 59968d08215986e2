from dataclasses import dataclass
# Import wrapper utility to preserve route metadata on decorators.
from functools import wraps
from typing import Optional

# Import session access for request authentication checks.
from flask import g, jsonify, session

from plastic_challenge.models.user import ROLE_ADMIN


@dataclass(frozen=True)
class Actor:
    """Identity of whoever is making the current request."""

    user_id: int
    role: str
    username: str = ""

    @property
    def is_admin(self):
        return self.role == ROLE_ADMIN


def login_user(user):
    session.clear()
    session["user_id"] = user.id
    session["username"] = user.username
    session["role"] = user.role


def logout_user():
    session.clear()
    g.pop("actor", None)


# Build the request-scoped actor from the session once per request.
def load_actor():
    user_id = session.get("user_id")
    if not user_id:
        g.actor = None
        return
    g.actor = Actor(user_id=int(user_id), role=session.get("role", ""), username=session.get("username", ""))


def current_actor() -> Optional[Actor]:
    return g.get("actor")


# Enforce session-based authentication for protected routes.
def login_required(view):
    @wraps(view)
    def wrapped(*args, **kwargs):
        # Validate user session to prevent unauthorized access.
        if current_actor() is None:
            return jsonify({"success": False, "error": "Authentication required"}), 401
        return view(*args, **kwargs)

    return wrapped


# Restrict routes to administrators.
def admin_required(view):
    @wraps(view)
    def wrapped(*args, **kwargs):
        actor = current_actor()
        if actor is None:
            return jsonify({"success": False, "error": "Authentication required"}), 401
        if not actor.is_admin:
            return jsonify({"success": False, "error": "Admin access required"}), 403
        return view(*args, **kwargs)

    return wrapped
