import os

import pytest

os.environ.setdefault("SECRET_KEY", "test-secret")

from app import app as flask_app
import db
import models
from werkzeug.security import generate_password_hash

TEST_PASSWORD = "str0ng!"


@pytest.fixture
def app(tmp_path):
    flask_app.config.update(
        TESTING=True,
        DATABASE=str(tmp_path / "test.db"),
        PG_HOST=None,
        PASSWORD_HASH_METHOD="pbkdf2:sha256:1000",
    )
    with flask_app.app_context():
        db.init_db()
    yield flask_app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def user(app):
    with app.app_context():
        return models.create_user(
            "test@calendar.local", "Test", "habit", "Run every day",
            generate_password_hash(TEST_PASSWORD, method="pbkdf2:sha256:1000"),
        )


@pytest.fixture
def logged_in(client, user):
    r = client.post("/login", data={"username": user["email"], "password": TEST_PASSWORD})
    assert r.headers["Location"].endswith("/home")
    return user
