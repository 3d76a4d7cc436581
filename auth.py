import logging
from functools import wraps

from flask import current_app, g, redirect, session, url_for
from werkzeug.security import generate_password_hash, check_password_hash

import models

logger = logging.getLogger(__name__)


class AuthenticationError(Exception):
    pass


def hash_password(password: str) -> str:
    return generate_password_hash(password, method=current_app.config["PASSWORD_HASH_METHOD"])


def authenticate(email: str, password: str):
    """Look up ``email`` and check ``password`` against its stored hash.

    Returns the user row on a match and None on a wrong password. An unknown
    email raises AuthenticationError; errors from the hash comparison itself
    propagate unchanged.
    """
    user = models.get_user_by_email(email)
    if user is None:
        raise AuthenticationError("user not found")
    if check_password_hash(user["password_hash"], password):
        return user
    return None


def login_user(user) -> None:
    # Only the id lives in the cookie; the profile is re-read when needed
    session.clear()
    session.permanent = True
    session["user_id"] = user["id"]


def logout_user() -> None:
    session.clear()


def load_user_id() -> None:
    g.user_id = session.get("user_id")


def login_required(view):
    @wraps(view)
    def wrapped(*args, **kwargs):
        if g.get("user_id") is None:
            return redirect(url_for("index"))
        return view(*args, **kwargs)

    return wrapped
