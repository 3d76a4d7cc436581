import logging
import sqlite3
import threading

import psycopg2
from psycopg2.extras import RealDictCursor
from psycopg2.pool import ThreadedConnectionPool
from flask import current_app, g

logger = logging.getLogger(__name__)

# DB-API exception groups of both drivers
DatabaseError = (sqlite3.Error, psycopg2.Error)
IntegrityError = (sqlite3.IntegrityError, psycopg2.IntegrityError)

_pool_lock = threading.Lock()

SQLITE_SCHEMA = '''
    CREATE TABLE IF NOT EXISTS users (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        email TEXT UNIQUE NOT NULL,
        name TEXT,
        type TEXT,
        goal TEXT,
        password_hash TEXT NOT NULL,
        goal_achieved BOOLEAN NOT NULL DEFAULT 0
    );
    CREATE TABLE IF NOT EXISTS calendar_entries (
        day_number INTEGER NOT NULL,
        user_id INTEGER NOT NULL REFERENCES users (id),
        motivation_score INTEGER NOT NULL DEFAULT 0,
        satisfaction_score INTEGER NOT NULL DEFAULT 0,
        PRIMARY KEY (day_number, user_id)
    );
'''

POSTGRES_SCHEMA = '''
    CREATE TABLE IF NOT EXISTS users (
        id SERIAL PRIMARY KEY,
        email TEXT UNIQUE NOT NULL,
        name TEXT,
        type TEXT,
        goal TEXT,
        password_hash TEXT NOT NULL,
        goal_achieved BOOLEAN NOT NULL DEFAULT FALSE
    );
    CREATE TABLE IF NOT EXISTS calendar_entries (
        day_number INTEGER NOT NULL,
        user_id INTEGER NOT NULL REFERENCES users (id),
        motivation_score INTEGER NOT NULL DEFAULT 0,
        satisfaction_score INTEGER NOT NULL DEFAULT 0,
        PRIMARY KEY (day_number, user_id)
    );
'''


class DBConn:
    """Thin wrapper giving both drivers the same query surface.

    Queries use ``?`` placeholders; they are rewritten to ``%s`` for
    psycopg2. Rows come back as plain dicts.
    """

    def __init__(self, conn, backend: str):
        self.conn = conn
        self.backend = backend

    def execute(self, query: str, params: tuple | list = ()):
        if self.backend == "postgres":
            cur = self.conn.cursor(cursor_factory=RealDictCursor)
            cur.execute(query.replace("?", "%s"), params)
            return cur
        return self.conn.execute(query, params)

    def fetchone(self, query: str, params: tuple | list = ()) -> dict | None:
        row = self.execute(query, params).fetchone()
        return dict(row) if row is not None else None

    def fetchall(self, query: str, params: tuple | list = ()) -> list[dict]:
        return [dict(row) for row in self.execute(query, params).fetchall()]

    def executescript(self, script: str) -> None:
        if self.backend == "postgres":
            for statement in (s.strip() for s in script.split(";")):
                if statement:
                    self.execute(statement)
        else:
            self.conn.executescript(script)

    def commit(self) -> None:
        self.conn.commit()

    def rollback(self) -> None:
        self.conn.rollback()


def using_postgres() -> bool:
    return bool(current_app.config.get("PG_HOST"))


def get_pool() -> ThreadedConnectionPool:
    pool = current_app.extensions.get("pg_pool")
    if pool is None:
        with _pool_lock:
            pool = current_app.extensions.get("pg_pool")
            if pool is None:
                cfg = current_app.config
                pool = ThreadedConnectionPool(
                    cfg["PG_POOL_MIN"],
                    cfg["PG_POOL_MAX"],
                    host=cfg["PG_HOST"],
                    port=cfg["PG_PORT"],
                    user=cfg["PG_USER"],
                    password=cfg["PG_PASSWORD"],
                    dbname=cfg["PG_DATABASE"],
                    sslmode=cfg["PG_SSLMODE"],
                )
                current_app.extensions["pg_pool"] = pool
                logger.info("Postgres pool ready: %s:%s/%s", cfg["PG_HOST"], cfg["PG_PORT"], cfg["PG_DATABASE"])
    return pool


def _ping(conn) -> bool:
    if conn.closed:
        return False
    try:
        cur = conn.cursor()
        cur.execute("SELECT 1")
        cur.close()
        conn.rollback()
    except (psycopg2.OperationalError, psycopg2.InterfaceError):
        return False
    return True


def _acquire_postgres() -> DBConn:
    pool = get_pool()
    conn = pool.getconn()
    if not _ping(conn):
        # Dropped by the server since last use; swap for a fresh one
        logger.warning("Replacing dead pooled connection")
        pool.putconn(conn, close=True)
        conn = pool.getconn()
    return DBConn(conn, "postgres")


def get_db() -> DBConn:
    db = getattr(g, '_database', None)
    if db is None:
        if using_postgres():
            db = _acquire_postgres()
        else:
            conn = sqlite3.connect(current_app.config["DATABASE"])
            conn.row_factory = sqlite3.Row
            conn.execute("PRAGMA foreign_keys = ON")
            db = DBConn(conn, "sqlite")
        g._database = db
    return db


def close_connection(exception):
    db = g.pop('_database', None)
    if db is None:
        return
    if db.backend == "postgres":
        conn = db.conn
        discard = bool(conn.closed)
        if not discard:
            try:
                conn.rollback()
            except psycopg2.Error:
                logger.warning("Discarding broken connection", exc_info=True)
                discard = True
        current_app.extensions["pg_pool"].putconn(conn, close=discard)
    else:
        db.conn.close()


def init_db():
    db = get_db()
    db.executescript(POSTGRES_SCHEMA if db.backend == "postgres" else SQLITE_SCHEMA)
    db.commit()


def check_db() -> bool:
    db = get_db()
    return db.fetchone("SELECT 1 AS ok") is not None


def init_app(app):
    app.teardown_appcontext(close_connection)
