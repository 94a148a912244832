"""SQLite schema for the marketplace store.

Provides ``init_marketplace_db()`` which opens the database with WAL mode and
foreign keys enabled, then creates every table the core reads and writes.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path


def init_marketplace_db(db_path: Path | str) -> sqlite3.Connection:
    """Create and initialize the marketplace database.

    Args:
        db_path: Path to the SQLite database file, or ``":memory:"``.

    Returns:
        An open sqlite3.Connection with WAL mode and foreign keys enabled.
    """
    conn = sqlite3.connect(str(db_path), check_same_thread=False, timeout=10)
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA foreign_keys=ON")
    init_marketplace_tables(conn)
    return conn


def init_marketplace_tables(conn: sqlite3.Connection) -> None:
    """Create the marketplace tables and indexes if they do not already exist.

    ``campaign_applications`` carries a UNIQUE constraint on
    ``(campaign_id, influencer_id)`` so there is at most one application per
    pair.  ``payment_transactions.session_id`` is UNIQUE so replays of the
    same payment event record a single transaction.

    Args:
        conn: An open sqlite3.Connection.
    """
    conn.execute("""
        CREATE TABLE IF NOT EXISTS campaigns (
            id TEXT PRIMARY KEY,
            brand_id TEXT NOT NULL,
            title TEXT NOT NULL DEFAULT '',
            description TEXT NOT NULL DEFAULT '',
            target_niches_json TEXT NOT NULL DEFAULT '[]',
            target_location TEXT,
            audience_min INTEGER,
            audience_max INTEGER,
            budget TEXT,
            status TEXT NOT NULL DEFAULT 'draft',
            start_date TEXT,
            end_date TEXT,
            created_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ', 'now')),
            updated_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ', 'now'))
        )
    """)
    conn.execute("CREATE INDEX IF NOT EXISTS idx_campaigns_status ON campaigns (status)")

    conn.execute("""
        CREATE TABLE IF NOT EXISTS influencer_profiles (
            id TEXT PRIMARY KEY,
            full_name TEXT NOT NULL DEFAULT '',
            niches_json TEXT NOT NULL DEFAULT '[]',
            location TEXT,
            audience_size INTEGER,
            engagement_rate REAL,
            follower_count INTEGER,
            avg_likes INTEGER,
            avg_comments INTEGER
        )
    """)

    conn.execute("""
        CREATE TABLE IF NOT EXISTS campaign_applications (
            id TEXT PRIMARY KEY,
            campaign_id TEXT NOT NULL REFERENCES campaigns (id) ON DELETE CASCADE,
            influencer_id TEXT NOT NULL REFERENCES influencer_profiles (id) ON DELETE CASCADE,
            status TEXT NOT NULL DEFAULT 'pending',
            created_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ', 'now')),
            updated_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ', 'now')),
            UNIQUE (campaign_id, influencer_id)
        )
    """)
    conn.execute(
        "CREATE INDEX IF NOT EXISTS idx_applications_influencer "
        "ON campaign_applications (influencer_id)"
    )

    conn.execute("""
        CREATE TABLE IF NOT EXISTS payment_transactions (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            session_id TEXT NOT NULL UNIQUE,
            campaign_id TEXT NOT NULL,
            brand_id TEXT,
            influencer_id TEXT NOT NULL,
            amount TEXT NOT NULL,
            platform_fee TEXT NOT NULL,
            status TEXT NOT NULL,
            created_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ', 'now'))
        )
    """)

    conn.execute("""
        CREATE TABLE IF NOT EXISTS notifications (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id TEXT NOT NULL,
            title TEXT NOT NULL,
            message TEXT NOT NULL,
            type TEXT NOT NULL,
            metadata TEXT,
            is_read INTEGER NOT NULL DEFAULT 0,
            created_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ', 'now'))
        )
    """)
    conn.execute("CREATE INDEX IF NOT EXISTS idx_notifications_user ON notifications (user_id)")

    conn.commit()


def close_marketplace_db(conn: sqlite3.Connection) -> None:
    """Close the marketplace database connection.

    Args:
        conn: The database connection to close.
    """
    conn.close()
