import logging

import click
from flask import Flask, request, render_template, redirect, url_for, g

import db
import models
import progress
from auth import (
    AuthenticationError,
    authenticate,
    hash_password,
    load_user_id,
    login_required,
    login_user,
    logout_user,
)
from config import Config

# === Setup Logging ===
logging.basicConfig(level=Config.LOG_LEVEL)
logger = logging.getLogger(__name__)

if not Config.SECRET_KEY:
    raise RuntimeError("Please set the SECRET_KEY environment variable.")

app = Flask(__name__)
app.config.from_object(Config)
db.init_app(app)
app.before_request(load_user_id)

DUPLICATE_EMAIL_MESSAGE = "Email already exists. Try logging in."


@app.cli.command("init-db")
def init_db_command():
    """Create the users and calendar_entries tables."""
    db.init_db()
    click.echo("Database initialised.")


@app.cli.command("check-db")
def check_db_command():
    """Check that the configured database answers."""
    try:
        db.check_db()
        click.echo("✅ Database connection works.")
    except db.DatabaseError as e:
        click.echo("❌ Database connection failed.")
        raise click.ClickException(str(e))


@app.route('/')
def index():
    return render_template('index.html')


@app.route('/register', methods=['GET', 'POST'])
def register():
    if request.method == 'GET':
        return render_template('register.html')

    email = request.form['email']
    name = request.form['jmeno']
    type_ = request.form['typ']
    goal = request.form['cil']
    password = request.form['heslo']

    try:
        if models.get_user_by_email(email) is not None:
            return DUPLICATE_EMAIL_MESSAGE
        user = models.create_user(email, name, type_, goal, hash_password(password))
    except models.DuplicateEmailError:
        logger.info("Registration raced on existing email %s", email)
        return DUPLICATE_EMAIL_MESSAGE
    except Exception:
        logger.exception("Error during registration")
        return "Server error during registration.", 500

    logger.info("Registered user %s", user["id"])
    try:
        login_user(user)
    except Exception:
        logger.exception("Login error after registration")
        return "Login failed after registration.", 500
    return redirect(url_for('home'))


@app.route('/login', methods=['GET', 'POST'])
def login():
    if request.method == 'GET':
        return render_template('login.html')

    email = request.form.get('username') or request.form.get('email', '')
    password = request.form.get('password', '')
    try:
        user = authenticate(email, password)
    except AuthenticationError as e:
        logger.info("Login rejected: %s", e)
        return redirect(url_for('login'))
    except Exception:
        logger.exception("Error during login")
        return "Login failed.", 500

    if user is None:
        logger.info("Login rejected: wrong password")
        return redirect(url_for('login'))
    login_user(user)
    logger.info("User %s logged in", user["id"])
    return redirect(url_for('home'))


@app.route('/logout')
def logout():
    try:
        logout_user()
    except Exception:
        logger.exception("Error during logout")
    return redirect(url_for('index'))


@app.route('/home')
@login_required
def home():
    try:
        days = progress.build_days(models.get_calendar_entries(g.user_id))
        user = models.get_user_by_id(g.user_id)
    except Exception:
        logger.exception("Error loading calendar")
        return "Error loading calendar", 500

    if user is None:
        # Account vanished behind a still-valid cookie
        logout_user()
        return redirect(url_for('index'))

    return render_template(
        'home.html',
        user=user,
        days=days,
        goal_reached_prompt=progress.goal_reached(days),
    )


@app.route('/save-day', methods=['POST'])
@login_required
def save_day():
    try:
        day = int(request.form['cislo'])
        motivation = int(request.form['motivace'])
        satisfaction = int(request.form['spokojenost'])
        models.save_calendar_entry(g.user_id, day, motivation, satisfaction)
    except Exception:
        logger.exception("Error saving day data")
        return "Failed to save day data.", 500
    logger.info("User %s saved day %s", g.user_id, day)
    return redirect(url_for('home'))


@app.route('/submit-goal-result', methods=['POST'])
@login_required
def submit_goal_result():
    achieved = request.form.get('dosazeno') == "true"
    try:
        models.set_goal_achieved(g.user_id, achieved)
    except Exception:
        logger.exception("Error saving goal result")
        return "Failed to save goal result.", 500
    logger.info("User %s goal achieved: %s", g.user_id, achieved)
    return redirect(url_for('home'))


if __name__ == '__main__':
    with app.app_context():
        db.init_db()
    app.run(host='0.0.0.0', port=Config.PORT)
