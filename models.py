"""Data access for users and their calendar entries.

Plain parameterized SQL over the request's connection from ``db.get_db``.
"""
from db import IntegrityError, get_db


class DuplicateEmailError(Exception):
    """An account with this email already exists."""


def _user(row):
    if row is not None:
        row["goal_achieved"] = bool(row["goal_achieved"])
    return row


def get_user_by_email(email):
    db = get_db()
    return _user(db.fetchone('SELECT * FROM users WHERE email = ?', (email,)))


def get_user_by_id(user_id):
    db = get_db()
    return _user(db.fetchone('SELECT * FROM users WHERE id = ?', (user_id,)))


def create_user(email, name, type_, goal, password_hash):
    db = get_db()
    try:
        rows = db.fetchall('''
            INSERT INTO users (email, name, type, goal, password_hash)
            VALUES (?, ?, ?, ?, ?)
            RETURNING *
        ''', (email, name, type_, goal, password_hash))
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise DuplicateEmailError(email) from e
    return _user(rows[0])


def get_calendar_entries(user_id):
    db = get_db()
    return db.fetchall(
        'SELECT * FROM calendar_entries WHERE user_id = ? ORDER BY day_number',
        (user_id,),
    )


def save_calendar_entry(user_id, day_number, motivation, satisfaction):
    # Single statement: the conflict resolution is atomic in storage
    db = get_db()
    db.execute('''
        INSERT INTO calendar_entries (day_number, user_id, motivation_score, satisfaction_score)
        VALUES (?, ?, ?, ?)
        ON CONFLICT (day_number, user_id) DO UPDATE SET
            motivation_score = excluded.motivation_score,
            satisfaction_score = excluded.satisfaction_score
    ''', (day_number, user_id, motivation, satisfaction))
    db.commit()


def set_goal_achieved(user_id, achieved):
    db = get_db()
    db.execute('UPDATE users SET goal_achieved = ? WHERE id = ?', (achieved, user_id))
    db.commit()
