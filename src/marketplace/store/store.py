"""SQLite-backed store for campaigns, influencer profiles, applications,
payment transactions, and notifications.

Accepts a sqlite3.Connection, uses parameterized queries exclusively, and
commits synchronously after writes.  Request threads share the connection,
so each statement and its commit run under the store lock.  Status changes
that race with other requests are expressed as single conditional ``UPDATE``
statements whose rowcount reports whether this caller performed the change.
"""

from __future__ import annotations

import json
import sqlite3
import threading
import uuid
from datetime import UTC, date, datetime
from decimal import Decimal
from typing import Any

from marketplace.domain.errors import StoreError
from marketplace.domain.models import (
    Application,
    AudienceRange,
    Campaign,
    InfluencerProfile,
)
from marketplace.domain.types import ApplicationStatus, CampaignStatus
from marketplace.state_machine.transitions import (
    CAMPAIGN_TERMINAL_STATES,
    PAYMENT_SETTLED_STATES,
    campaign_statuses_before,
)


def _now() -> str:
    return datetime.now(tz=UTC).strftime("%Y-%m-%dT%H:%M:%SZ")


def _placeholders(values: list[Any]) -> str:
    return ", ".join("?" for _ in values)


def _campaign_from_row(row: sqlite3.Row) -> Campaign:
    target_audience = None
    if row["audience_min"] is not None or row["audience_max"] is not None:
        target_audience = AudienceRange(
            min_size=row["audience_min"], max_size=row["audience_max"]
        )
    return Campaign(
        id=row["id"],
        brand_id=row["brand_id"],
        title=row["title"],
        description=row["description"],
        target_niches=json.loads(row["target_niches_json"]),
        target_location=row["target_location"],
        target_audience=target_audience,
        budget=row["budget"],
        status=row["status"],
        start_date=row["start_date"],
        end_date=row["end_date"],
    )


def _influencer_from_row(row: sqlite3.Row) -> InfluencerProfile:
    return InfluencerProfile(
        id=row["id"],
        full_name=row["full_name"],
        niches=json.loads(row["niches_json"]),
        location=row["location"],
        audience_size=row["audience_size"],
        engagement_rate=row["engagement_rate"],
        follower_count=row["follower_count"],
        avg_likes=row["avg_likes"],
        avg_comments=row["avg_comments"],
    )


def _application_from_row(row: sqlite3.Row) -> Application:
    return Application(
        id=row["id"],
        campaign_id=row["campaign_id"],
        influencer_id=row["influencer_id"],
        status=row["status"],
    )


class MarketplaceStore:
    """Persist and query marketplace records in SQLite.

    One instance wraps one connection; construct it per process (or per
    request) and pass it to the services that need it.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        """Initialize with an open database connection.

        Args:
            conn: An open sqlite3.Connection whose database already has the
                  marketplace tables (see ``init_marketplace_tables``).
        """
        self._conn = conn
        self._lock = threading.RLock()

    def _query(self, sql: str, params: tuple[Any, ...] | list[Any] = ()) -> list[sqlite3.Row]:
        with self._lock:
            cursor = self._conn.cursor()
            cursor.row_factory = sqlite3.Row
            cursor.execute(sql, params)
            return cursor.fetchall()

    def _execute(self, sql: str, params: tuple[Any, ...] | list[Any] = ()) -> int:
        """Run a single write statement, commit, and return its rowcount."""
        with self._lock:
            cursor = self._conn.execute(sql, params)
            self._conn.commit()
            return cursor.rowcount

    # ------------------------------------------------------------------
    # Campaigns
    # ------------------------------------------------------------------

    def save_campaign(self, campaign: Campaign) -> None:
        """Insert or fully replace a campaign row, preserving ``created_at``."""
        audience = campaign.target_audience
        now = _now()
        self._execute(
            """
            INSERT INTO campaigns (
                id, brand_id, title, description, target_niches_json,
                target_location, audience_min, audience_max, budget, status,
                start_date, end_date, created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT (id) DO UPDATE SET
                brand_id = excluded.brand_id,
                title = excluded.title,
                description = excluded.description,
                target_niches_json = excluded.target_niches_json,
                target_location = excluded.target_location,
                audience_min = excluded.audience_min,
                audience_max = excluded.audience_max,
                budget = excluded.budget,
                status = excluded.status,
                start_date = excluded.start_date,
                end_date = excluded.end_date,
                updated_at = excluded.updated_at
            """,
            (
                campaign.id,
                campaign.brand_id,
                campaign.title,
                campaign.description,
                json.dumps(sorted(campaign.target_niches)),
                campaign.target_location,
                audience.min_size if audience else None,
                audience.max_size if audience else None,
                str(campaign.budget) if campaign.budget is not None else None,
                campaign.status.value,
                campaign.start_date.isoformat() if campaign.start_date else None,
                campaign.end_date.isoformat() if campaign.end_date else None,
                now,
                now,
            ),
        )

    def get_campaign(self, campaign_id: str) -> Campaign | None:
        rows = self._query("SELECT * FROM campaigns WHERE id = ?", (campaign_id,))
        return _campaign_from_row(rows[0]) if rows else None

    def list_campaigns(self, statuses: frozenset[CampaignStatus] | None = None) -> list[Campaign]:
        """Return campaigns, optionally restricted to the given statuses."""
        if statuses is None:
            rows = self._query("SELECT * FROM campaigns ORDER BY id")
        else:
            values = sorted(s.value for s in statuses)
            rows = self._query(
                f"SELECT * FROM campaigns WHERE status IN ({_placeholders(values)}) ORDER BY id",
                values,
            )
        return [_campaign_from_row(row) for row in rows]

    def advance_campaign_status(self, campaign_id: str, target: CampaignStatus) -> bool:
        """Atomically move a campaign forward to *target*.

        The write only applies when the current status is one from which
        *target* is a forward move, so concurrent callers cannot both perform
        the same transition and no call can move a campaign backwards.

        Returns:
            True if this call changed the row, False if the campaign was
            already at or past *target* (or does not exist).
        """
        allowed = [s.value for s in campaign_statuses_before(target)]
        if not allowed:
            return False
        return (
            self._execute(
                f"UPDATE campaigns SET status = ?, updated_at = ? "
                f"WHERE id = ? AND status IN ({_placeholders(allowed)})",
                (target.value, _now(), campaign_id, *allowed),
            )
            > 0
        )

    def campaigns_due_for_activation(self, today: date) -> list[Campaign]:
        """Return scheduled campaigns whose start date is on or before *today*."""
        rows = self._query(
            "SELECT * FROM campaigns WHERE status = ? AND start_date IS NOT NULL "
            "AND start_date <= ? ORDER BY start_date, id",
            (CampaignStatus.SCHEDULED.value, today.isoformat()),
        )
        return [_campaign_from_row(row) for row in rows]

    def campaigns_past_end(self, today: date) -> list[Campaign]:
        """Return non-terminal campaigns whose end date is before *today*."""
        terminal = sorted(s.value for s in CAMPAIGN_TERMINAL_STATES)
        rows = self._query(
            f"SELECT * FROM campaigns WHERE status NOT IN ({_placeholders(terminal)}) "
            "AND end_date IS NOT NULL AND end_date < ? ORDER BY end_date, id",
            (*terminal, today.isoformat()),
        )
        return [_campaign_from_row(row) for row in rows]

    # ------------------------------------------------------------------
    # Influencer profiles
    # ------------------------------------------------------------------

    def save_influencer(self, profile: InfluencerProfile) -> None:
        """Insert or fully replace an influencer profile row."""
        self._execute(
            """
            INSERT OR REPLACE INTO influencer_profiles (
                id, full_name, niches_json, location, audience_size,
                engagement_rate, follower_count, avg_likes, avg_comments
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                profile.id,
                profile.full_name,
                json.dumps(sorted(profile.niches)),
                profile.location,
                profile.audience_size,
                profile.engagement_rate,
                profile.follower_count,
                profile.avg_likes,
                profile.avg_comments,
            ),
        )

    def get_influencer(self, influencer_id: str) -> InfluencerProfile | None:
        rows = self._query("SELECT * FROM influencer_profiles WHERE id = ?", (influencer_id,))
        return _influencer_from_row(rows[0]) if rows else None

    def list_influencers(self) -> list[InfluencerProfile]:
        rows = self._query("SELECT * FROM influencer_profiles ORDER BY id")
        return [_influencer_from_row(row) for row in rows]

    # ------------------------------------------------------------------
    # Applications
    # ------------------------------------------------------------------

    def create_application(
        self,
        campaign_id: str,
        influencer_id: str,
        application_id: str | None = None,
    ) -> Application:
        """Insert a pending application for the (campaign, influencer) pair.

        Raises:
            StoreError: If an application for the pair already exists or
                either referenced record is missing.
        """
        application = Application(
            id=application_id or str(uuid.uuid4()),
            campaign_id=campaign_id,
            influencer_id=influencer_id,
        )
        now = _now()
        with self._lock:
            try:
                self._conn.execute(
                    "INSERT INTO campaign_applications "
                    "(id, campaign_id, influencer_id, status, created_at, updated_at) "
                    "VALUES (?, ?, ?, ?, ?, ?)",
                    (
                        application.id,
                        campaign_id,
                        influencer_id,
                        application.status.value,
                        now,
                        now,
                    ),
                )
                self._conn.commit()
            except sqlite3.IntegrityError as exc:
                self._conn.rollback()
                raise StoreError(
                    f"Cannot create application for campaign '{campaign_id}' "
                    f"and influencer '{influencer_id}': {exc}"
                ) from exc
        return application

    def get_application(self, campaign_id: str, influencer_id: str) -> Application | None:
        rows = self._query(
            "SELECT * FROM campaign_applications WHERE campaign_id = ? AND influencer_id = ?",
            (campaign_id, influencer_id),
        )
        return _application_from_row(rows[0]) if rows else None

    def list_applications(self, campaign_id: str) -> list[Application]:
        rows = self._query(
            "SELECT * FROM campaign_applications WHERE campaign_id = ? ORDER BY created_at, id",
            (campaign_id,),
        )
        return [_application_from_row(row) for row in rows]

    def applied_campaign_ids(self, influencer_id: str) -> set[str]:
        """Return the IDs of campaigns the influencer has an application for."""
        rows = self._query(
            "SELECT campaign_id FROM campaign_applications WHERE influencer_id = ?",
            (influencer_id,),
        )
        return {row["campaign_id"] for row in rows}

    def applicant_ids(self, campaign_id: str) -> set[str]:
        """Return the IDs of influencers with an application to the campaign."""
        rows = self._query(
            "SELECT influencer_id FROM campaign_applications WHERE campaign_id = ?",
            (campaign_id,),
        )
        return {row["influencer_id"] for row in rows}

    def set_application_status(
        self,
        application_id: str,
        status: ApplicationStatus,
        *,
        expected: ApplicationStatus,
    ) -> bool:
        """Compare-and-set an application's status.

        Returns:
            True if the row was still in *expected* and has been updated.
        """
        return (
            self._execute(
                "UPDATE campaign_applications SET status = ?, updated_at = ? "
                "WHERE id = ? AND status = ?",
                (status.value, _now(), application_id, expected.value),
            )
            > 0
        )

    def mark_application_paid(self, campaign_id: str, influencer_id: str) -> bool:
        """Atomically set the pair's application to ``approved_and_paid``.

        Applications that are already settled (paid or completed) are left
        untouched.

        Returns:
            True if this call changed the row.
        """
        settled = sorted(s.value for s in PAYMENT_SETTLED_STATES)
        return (
            self._execute(
                "UPDATE campaign_applications SET status = ?, updated_at = ? "
                "WHERE campaign_id = ? AND influencer_id = ? "
                f"AND status NOT IN ({_placeholders(settled)})",
                (
                    ApplicationStatus.APPROVED_AND_PAID.value,
                    _now(),
                    campaign_id,
                    influencer_id,
                    *settled,
                ),
            )
            > 0
        )

    # ------------------------------------------------------------------
    # Payment transactions
    # ------------------------------------------------------------------

    def record_transaction(
        self,
        *,
        session_id: str,
        campaign_id: str,
        brand_id: str | None,
        influencer_id: str,
        amount: Decimal,
        platform_fee: Decimal,
        status: str = "completed",
    ) -> int:
        """Record a payment transaction once per provider session.

        A replayed session returns the ID of the existing row.

        Returns:
            The row ID of the transaction for *session_id*.
        """
        with self._lock:
            self._execute(
                """
                INSERT OR IGNORE INTO payment_transactions (
                    session_id, campaign_id, brand_id, influencer_id,
                    amount, platform_fee, status, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    session_id,
                    campaign_id,
                    brand_id,
                    influencer_id,
                    str(amount),
                    str(platform_fee),
                    status,
                    _now(),
                ),
            )
            rows = self._query(
                "SELECT id FROM payment_transactions WHERE session_id = ?", (session_id,)
            )
        return int(rows[0]["id"])

    def list_transactions(self, user_id: str) -> list[dict[str, Any]]:
        """Return transactions where *user_id* is the brand or the influencer, newest first."""
        rows = self._query(
            "SELECT * FROM payment_transactions WHERE brand_id = ? OR influencer_id = ? "
            "ORDER BY created_at DESC, id DESC",
            (user_id, user_id),
        )
        return [dict(row) for row in rows]

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    def insert_notification(
        self,
        *,
        user_id: str,
        title: str,
        message: str,
        notification_type: str,
        metadata: dict[str, str] | None = None,
    ) -> int:
        """Insert an unread notification and return its row ID."""
        with self._lock:
            cursor = self._conn.execute(
                "INSERT INTO notifications (user_id, title, message, type, metadata, created_at) "
                "VALUES (?, ?, ?, ?, ?, ?)",
                (
                    user_id,
                    title,
                    message,
                    notification_type,
                    json.dumps(metadata) if metadata is not None else None,
                    _now(),
                ),
            )
            self._conn.commit()
            return cursor.lastrowid or 0

    def list_notifications(
        self, user_id: str, *, unread_only: bool = False
    ) -> list[dict[str, Any]]:
        """Return a user's notifications, newest first."""
        sql = "SELECT * FROM notifications WHERE user_id = ?"
        if unread_only:
            sql += " AND is_read = 0"
        rows = self._query(sql + " ORDER BY id DESC", (user_id,))
        results: list[dict[str, Any]] = []
        for row in rows:
            row_dict = dict(row)
            row_dict["is_read"] = bool(row_dict["is_read"])
            if row_dict.get("metadata") is not None:
                row_dict["metadata"] = json.loads(row_dict["metadata"])
            results.append(row_dict)
        return results

    def mark_notifications_read(
        self, user_id: str, notification_ids: list[int] | None = None
    ) -> int:
        """Mark a user's notifications read; all unread ones when no IDs are given.

        Returns:
            The number of notifications that changed from unread to read.
        """
        sql = "UPDATE notifications SET is_read = 1 WHERE user_id = ? AND is_read = 0"
        params: list[Any] = [user_id]
        if notification_ids is not None:
            if not notification_ids:
                return 0
            sql += f" AND id IN ({_placeholders(notification_ids)})"
            params.extend(notification_ids)
        return self._execute(sql, params)
