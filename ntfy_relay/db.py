"""SQLite database operations for subscriptions and received messages."""

import sqlite3
from datetime import datetime, timezone
from typing import List, Optional, Tuple


def init_db(db_path: str) -> sqlite3.Connection:
    """
    Initialize the database and create tables if they don't exist.

    Args:
        db_path: Path to the SQLite database file.

    Returns:
        A connection to the database.
    """
    # Polls run on worker threads, writes are serialized by the caller
    conn = sqlite3.connect(db_path, check_same_thread=False)
    conn.execute("""
        CREATE TABLE IF NOT EXISTS subscriptions (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            base_url TEXT NOT NULL,
            topic TEXT NOT NULL,
            created_at TEXT NOT NULL,
            UNIQUE (base_url, topic)
        )
    """)
    conn.execute("""
        CREATE TABLE IF NOT EXISTS messages (
            id TEXT NOT NULL,
            subscription_id INTEGER NOT NULL,
            time INTEGER NOT NULL,
            payload TEXT NOT NULL,
            PRIMARY KEY (id, subscription_id)
        )
    """)
    conn.commit()
    return conn


def get_subscriptions(conn: sqlite3.Connection) -> List[Tuple[int, str, str]]:
    """
    Retrieve all subscriptions.

    Returns:
        A list of (id, base_url, topic) tuples in creation order.
    """
    cursor = conn.execute("SELECT id, base_url, topic FROM subscriptions ORDER BY id")
    return [(row[0], row[1], row[2]) for row in cursor.fetchall()]


def add_subscription(conn: sqlite3.Connection, base_url: str, topic: str) -> int:
    """
    Add a subscription, or return the existing one for the same (base_url, topic).

    Returns:
        The subscription id.
    """
    now = datetime.now(timezone.utc).isoformat()
    conn.execute(
        "INSERT OR IGNORE INTO subscriptions (base_url, topic, created_at) VALUES (?, ?, ?)",
        (base_url, topic, now)
    )
    conn.commit()
    cursor = conn.execute(
        "SELECT id FROM subscriptions WHERE base_url = ? AND topic = ?",
        (base_url, topic)
    )
    return cursor.fetchone()[0]


def remove_subscription(conn: sqlite3.Connection, base_url: str, topic: str) -> bool:
    """
    Remove a subscription and its messages.

    Returns:
        True if a subscription was removed.
    """
    cursor = conn.execute(
        "SELECT id FROM subscriptions WHERE base_url = ? AND topic = ?",
        (base_url, topic)
    )
    row = cursor.fetchone()
    if not row:
        return False
    conn.execute("DELETE FROM messages WHERE subscription_id = ?", (row[0],))
    conn.execute("DELETE FROM subscriptions WHERE id = ?", (row[0],))
    conn.commit()
    return True


def insert_messages(
    conn: sqlite3.Connection,
    subscription_id: int,
    messages: List[Tuple[str, int, str]]
) -> None:
    """
    Store received messages, ignoring ones already stored.

    Args:
        conn: Database connection.
        subscription_id: Owning subscription.
        messages: List of (id, time, payload_json) tuples.
    """
    conn.executemany(
        "INSERT OR IGNORE INTO messages (id, subscription_id, time, payload) VALUES (?, ?, ?, ?)",
        [(message_id, subscription_id, time, payload) for message_id, time, payload in messages]
    )
    conn.commit()


def get_last_message_id(conn: sqlite3.Connection, subscription_id: int) -> Optional[str]:
    """
    Get the id of the newest stored message for a subscription.

    Returns:
        The message id, or None if nothing was received yet.
    """
    cursor = conn.execute(
        "SELECT id FROM messages WHERE subscription_id = ? ORDER BY time DESC, rowid DESC LIMIT 1",
        (subscription_id,)
    )
    row = cursor.fetchone()
    return row[0] if row else None
