"""
ent — SQLite State Module
Persists settings, generation history and the running viewer's PID.
"""

import sqlite3
import os
from datetime import datetime


def get_state_dir():
    """State directory: $ENT_STATE_DIR or ~/.local/state/ent."""
    state_dir = os.environ.get("ENT_STATE_DIR")
    if not state_dir:
        base = os.environ.get("XDG_STATE_HOME", os.path.join(os.path.expanduser("~"), ".local", "state"))
        state_dir = os.path.join(base, "ent")
    return state_dir


def get_db_path():
    return os.path.join(get_state_dir(), "ent.db")


def get_connection():
    """Get a database connection with row factory, creating the schema on first use."""
    os.makedirs(get_state_dir(), exist_ok=True)
    conn = sqlite3.connect(get_db_path())
    conn.row_factory = sqlite3.Row
    _init_schema(conn)
    return conn


def _init_schema(conn):
    cursor = conn.cursor()
    cursor.execute("""
        CREATE TABLE IF NOT EXISTS images (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            path TEXT NOT NULL,
            seed INTEGER NOT NULL,
            pattern TEXT NOT NULL,
            color_filter TEXT DEFAULT '',
            status TEXT DEFAULT 'done',
            created_at TEXT DEFAULT CURRENT_TIMESTAMP
        )
    """)
    cursor.execute("""
        CREATE TABLE IF NOT EXISTS settings (
            key TEXT PRIMARY KEY,
            value TEXT DEFAULT ''
        )
    """)
    conn.commit()


def save_setting(key, value):
    """Save a setting to the database."""
    conn = get_connection()
    cursor = conn.cursor()
    cursor.execute("""
        INSERT INTO settings (key, value) VALUES (?, ?)
        ON CONFLICT(key) DO UPDATE SET value = excluded.value
    """, (key, str(value)))
    conn.commit()
    conn.close()


def get_setting(key, default=""):
    """Get a setting from the database."""
    conn = get_connection()
    cursor = conn.cursor()
    cursor.execute("SELECT value FROM settings WHERE key = ?", (key,))
    row = cursor.fetchone()
    conn.close()
    return row["value"] if row else default


def delete_setting(key):
    conn = get_connection()
    cursor = conn.cursor()
    cursor.execute("DELETE FROM settings WHERE key = ?", (key,))
    conn.commit()
    conn.close()


def get_all_settings():
    conn = get_connection()
    cursor = conn.cursor()
    cursor.execute("SELECT key, value FROM settings")
    rows = cursor.fetchall()
    conn.close()
    return {row["key"]: row["value"] for row in rows}


def add_image(path, seed, pattern, color_filter="", status="done"):
    """Record one generation attempt. Failed attempts keep their would-be path."""
    conn = get_connection()
    cursor = conn.cursor()
    cursor.execute("""
        INSERT INTO images (path, seed, pattern, color_filter, status, created_at)
        VALUES (?, ?, ?, ?, ?, ?)
    """, (path, seed, pattern, color_filter, status, datetime.now().isoformat()))
    image_id = cursor.lastrowid
    conn.commit()
    conn.close()
    return image_id


def get_recent_images(limit=20):
    """Most recent generation attempts, newest first."""
    conn = get_connection()
    cursor = conn.cursor()
    cursor.execute("SELECT * FROM images ORDER BY id DESC LIMIT ?", (limit,))
    rows = cursor.fetchall()
    conn.close()
    return [dict(row) for row in rows]
