"""SQLite data store for PriceWatch."""

import logging
import sqlite3
from datetime import datetime, time, timedelta, timezone
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from pricewatch.models import (
    Alert,
    AlertStats,
    MarkResult,
    MarketType,
    PriceData,
    WatchlistItem,
)
from pricewatch.models.alert import normalize_symbol, utc_now

logger = logging.getLogger(__name__)


def _to_iso(value: datetime) -> str:
    """Serialize a datetime as a sortable UTC ISO string."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


def _from_iso(value: Optional[str]) -> Optional[datetime]:
    if value is None:
        return None
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _to_text(value: Optional[Decimal]) -> Optional[str]:
    return None if value is None else str(value)


def _to_decimal(value: Optional[str]) -> Optional[Decimal]:
    return None if value is None else Decimal(value)


class DataStore:
    """SQLite-based data store for alerts, watchlists and paper quotes."""

    REQUIRED_TABLES = [
        "alerts",
        "watchlist_items",
        "quotes",
    ]

    def __init__(self, db_path: Path):
        """Initialize the data store.

        Args:
            db_path: Path to the SQLite database file.
        """
        self.db_path = db_path
        self._ensure_db_dir()
        self._init_schema()

    def _ensure_db_dir(self) -> None:
        """Ensure the database directory exists."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def _get_connection(self) -> sqlite3.Connection:
        """Get a database connection."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_schema(self) -> None:
        """Initialize database schema on first run."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS alerts (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id INTEGER NOT NULL,
                    symbol TEXT NOT NULL,
                    condition TEXT NOT NULL,
                    target_value TEXT NOT NULL,
                    is_active INTEGER NOT NULL DEFAULT 1,
                    is_triggered INTEGER NOT NULL DEFAULT 0,
                    triggered_at TEXT,
                    message TEXT,
                    created_at TEXT NOT NULL
                )
            """)
            cursor.execute(
                "CREATE INDEX IF NOT EXISTS idx_alerts_eligible "
                "ON alerts (is_active, is_triggered, symbol)"
            )
            cursor.execute(
                "CREATE INDEX IF NOT EXISTS idx_alerts_user ON alerts (user_id)"
            )

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS watchlist_items (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id INTEGER NOT NULL,
                    symbol TEXT NOT NULL,
                    market_type TEXT NOT NULL,
                    label TEXT,
                    last_price TEXT,
                    price_change_24h TEXT,
                    last_checked_at TEXT,
                    alert_above TEXT,
                    alert_below TEXT,
                    created_at TEXT NOT NULL,
                    UNIQUE(user_id, symbol)
                )
            """)

            # Paper quotes for the provider-free oracle
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS quotes (
                    symbol TEXT PRIMARY KEY,
                    price TEXT NOT NULL,
                    change_24h TEXT,
                    updated_at TEXT NOT NULL
                )
            """)

            conn.commit()
        finally:
            conn.close()

    def get_tables(self) -> list[str]:
        """Get list of all tables in the database."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT name FROM sqlite_master WHERE type='table' AND name NOT LIKE 'sqlite_%'"
            )
            return [row["name"] for row in cursor.fetchall()]
        finally:
            conn.close()

    # ==================== Alerts ====================

    @staticmethod
    def _row_to_alert(row: sqlite3.Row) -> Alert:
        return Alert(
            id=row["id"],
            user_id=row["user_id"],
            symbol=row["symbol"],
            condition=row["condition"],
            target_value=Decimal(row["target_value"]),
            is_active=bool(row["is_active"]),
            is_triggered=bool(row["is_triggered"]),
            triggered_at=_from_iso(row["triggered_at"]),
            message=row["message"],
            created_at=_from_iso(row["created_at"]),
        )

    def _load_alerts(self, rows: list[sqlite3.Row]) -> list[Alert]:
        """Convert rows to alerts, skipping records that fail to load."""
        alerts = []
        for row in rows:
            try:
                alerts.append(self._row_to_alert(row))
            except (ValidationError, InvalidOperation, ValueError, TypeError) as e:
                logger.warning("Skipping malformed alert record %s: %s", row["id"], e)
        return alerts

    def save_alert(self, alert: Alert) -> int:
        """Save an alert to the database.

        Args:
            alert: Alert to save.

        Returns:
            The ID of the saved alert.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT INTO alerts
                (user_id, symbol, condition, target_value, is_active,
                 is_triggered, triggered_at, message, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    alert.user_id,
                    alert.symbol,
                    alert.condition,
                    str(alert.target_value),
                    1 if alert.is_active else 0,
                    1 if alert.is_triggered else 0,
                    _to_iso(alert.triggered_at) if alert.triggered_at else None,
                    alert.message,
                    _to_iso(alert.created_at),
                ),
            )
            conn.commit()
            return cursor.lastrowid or 0
        finally:
            conn.close()

    def get_alerts(
        self, user_id: Optional[int] = None, include_triggered: bool = True
    ) -> list[Alert]:
        """Get alerts, optionally filtered by owner and status.

        Args:
            user_id: Only return alerts owned by this user.
            include_triggered: Include alerts that have already fired.

        Returns:
            List of alerts, newest first.
        """
        clauses = []
        params: list = []
        if user_id is not None:
            clauses.append("user_id = ?")
            params.append(user_id)
        if not include_triggered:
            clauses.append("is_triggered = 0")
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                f"SELECT * FROM alerts {where} ORDER BY created_at DESC, id DESC",
                params,
            )
            return self._load_alerts(cursor.fetchall())
        finally:
            conn.close()

    def get_alert_by_id(self, alert_id: int) -> Optional[Alert]:
        """Get an alert by ID.

        Args:
            alert_id: Alert ID.

        Returns:
            Alert if found, None otherwise.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("SELECT * FROM alerts WHERE id = ?", (alert_id,))
            row = cursor.fetchone()
            if row:
                return self._row_to_alert(row)
            return None
        finally:
            conn.close()

    def delete_alert(self, alert_id: int) -> bool:
        """Delete an alert.

        Args:
            alert_id: ID of the alert to delete.

        Returns:
            True if a row was deleted.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM alerts WHERE id = ?", (alert_id,))
            conn.commit()
            return cursor.rowcount > 0
        finally:
            conn.close()

    def list_eligible(self) -> list[Alert]:
        """Get alerts that are active and not yet triggered.

        Returns:
            Eligible alerts ordered by symbol, then ID.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT * FROM alerts
                WHERE is_active = 1 AND is_triggered = 0
                ORDER BY symbol, id
                """
            )
            return self._load_alerts(cursor.fetchall())
        finally:
            conn.close()

    def mark_triggered(
        self, alert_id: int, message: str, triggered_at: datetime
    ) -> MarkResult:
        """Transition an alert to triggered, only if it is not already.

        The update is a single conditional statement, so of two callers
        racing on the same alert exactly one receives ``SUCCESS``.

        Args:
            alert_id: Alert ID.
            message: Rendered notification text.
            triggered_at: Transition timestamp.

        Returns:
            SUCCESS if this call performed the transition, ALREADY_TRIGGERED
            if the alert had fired before, NOT_FOUND if no such alert exists
            or it was deactivated.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                UPDATE alerts
                SET is_triggered = 1, triggered_at = ?, message = ?
                WHERE id = ? AND is_active = 1 AND is_triggered = 0
                """,
                (_to_iso(triggered_at), message, alert_id),
            )
            conn.commit()
            if cursor.rowcount == 1:
                return MarkResult.SUCCESS

            cursor.execute(
                "SELECT is_active, is_triggered FROM alerts WHERE id = ?", (alert_id,)
            )
            row = cursor.fetchone()
            if row is None or (not row["is_triggered"] and not row["is_active"]):
                return MarkResult.NOT_FOUND
            return MarkResult.ALREADY_TRIGGERED
        finally:
            conn.close()

    def purge_triggered_older_than(
        self, duration: timedelta, now: Optional[datetime] = None
    ) -> int:
        """Delete triggered alerts that fired more than ``duration`` ago.

        Args:
            duration: Retention window.
            now: Reference time (defaults to current UTC time).

        Returns:
            Number of alerts removed.
        """
        cutoff = (now or utc_now()) - duration
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                DELETE FROM alerts
                WHERE is_triggered = 1
                AND triggered_at IS NOT NULL
                AND triggered_at < ?
                """,
                (_to_iso(cutoff),),
            )
            conn.commit()
            return cursor.rowcount
        finally:
            conn.close()

    def get_alert_stats(self, now: Optional[datetime] = None) -> AlertStats:
        """Get alert statistics.

        Args:
            now: Reference time for "today" (defaults to current UTC time).

        Returns:
            AlertStats with active, triggered-today and per-symbol counts.
        """
        now = now or utc_now()
        midnight = datetime.combine(
            now.astimezone(timezone.utc).date(), time.min, tzinfo=timezone.utc
        )
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT symbol, COUNT(*) AS count FROM alerts
                WHERE is_active = 1 AND is_triggered = 0
                GROUP BY symbol ORDER BY symbol
                """
            )
            by_symbol = {row["symbol"]: row["count"] for row in cursor.fetchall()}

            cursor.execute(
                """
                SELECT COUNT(*) AS count FROM alerts
                WHERE is_triggered = 1 AND triggered_at >= ?
                """,
                (_to_iso(midnight),),
            )
            triggered_today = cursor.fetchone()["count"]

            return AlertStats(
                total_active=sum(by_symbol.values()),
                total_triggered_today=triggered_today,
                by_symbol=by_symbol,
            )
        finally:
            conn.close()

    # ==================== Watchlist ====================

    @staticmethod
    def _row_to_watchlist_item(row: sqlite3.Row) -> WatchlistItem:
        return WatchlistItem(
            id=row["id"],
            user_id=row["user_id"],
            symbol=row["symbol"],
            market_type=MarketType(row["market_type"]),
            label=row["label"],
            last_price=_to_decimal(row["last_price"]),
            price_change_24h=_to_decimal(row["price_change_24h"]),
            last_checked_at=_from_iso(row["last_checked_at"]),
            alert_above=_to_decimal(row["alert_above"]),
            alert_below=_to_decimal(row["alert_below"]),
            created_at=_from_iso(row["created_at"]),
        )

    def _load_watchlist_items(self, rows: list[sqlite3.Row]) -> list[WatchlistItem]:
        """Convert rows to watchlist items, skipping records that fail to load."""
        items = []
        for row in rows:
            try:
                items.append(self._row_to_watchlist_item(row))
            except (ValidationError, InvalidOperation, ValueError, TypeError) as e:
                logger.warning("Skipping malformed watchlist record %s: %s", row["id"], e)
        return items

    def count_watchlist(self, user_id: int) -> int:
        """Count the watchlist items owned by a user."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT COUNT(*) AS count FROM watchlist_items WHERE user_id = ?",
                (user_id,),
            )
            return cursor.fetchone()["count"]
        finally:
            conn.close()

    def get_watchlist_item(self, user_id: int, symbol: str) -> Optional[WatchlistItem]:
        """Get a single watchlist item.

        Args:
            user_id: Owner.
            symbol: Symbol (normalized before lookup).

        Returns:
            The item if the symbol is on the user's watchlist, None otherwise.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT * FROM watchlist_items WHERE user_id = ? AND symbol = ?",
                (user_id, normalize_symbol(symbol)),
            )
            row = cursor.fetchone()
            items = self._load_watchlist_items([row]) if row else []
            return items[0] if items else None
        finally:
            conn.close()

    def upsert_watchlist_item(self, item: WatchlistItem) -> WatchlistItem:
        """Insert a watchlist item or update the existing one.

        Items are keyed by ``(user_id, symbol)``. On conflict the market
        type, label and price fields are replaced; advisory thresholds and
        the creation time are kept. A missing label or price on re-add
        keeps the previously stored value.

        Args:
            item: Item to save.

        Returns:
            The stored item.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT INTO watchlist_items
                (user_id, symbol, market_type, label, last_price,
                 price_change_24h, last_checked_at, alert_above, alert_below,
                 created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(user_id, symbol) DO UPDATE SET
                    market_type = excluded.market_type,
                    label = COALESCE(excluded.label, label),
                    last_price = COALESCE(excluded.last_price, last_price),
                    price_change_24h = CASE
                        WHEN excluded.last_price IS NULL THEN price_change_24h
                        ELSE excluded.price_change_24h END,
                    last_checked_at = COALESCE(excluded.last_checked_at, last_checked_at)
                """,
                (
                    item.user_id,
                    item.symbol,
                    item.market_type.value,
                    item.label,
                    _to_text(item.last_price),
                    _to_text(item.price_change_24h),
                    _to_iso(item.last_checked_at) if item.last_checked_at else None,
                    _to_text(item.alert_above),
                    _to_text(item.alert_below),
                    _to_iso(item.created_at),
                ),
            )
            conn.commit()
            cursor.execute(
                "SELECT * FROM watchlist_items WHERE user_id = ? AND symbol = ?",
                (item.user_id, item.symbol),
            )
            return self._row_to_watchlist_item(cursor.fetchone())
        finally:
            conn.close()

    def update_watchlist_prices(
        self,
        user_id: int,
        symbol: str,
        price: Decimal,
        change_24h: Optional[Decimal],
        checked_at: datetime,
    ) -> bool:
        """Record a successful price refresh for a watchlist item.

        Returns:
            True if the item exists and was updated.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                UPDATE watchlist_items
                SET last_price = ?, price_change_24h = ?, last_checked_at = ?
                WHERE user_id = ? AND symbol = ?
                """,
                (
                    str(price),
                    _to_text(change_24h),
                    _to_iso(checked_at),
                    user_id,
                    normalize_symbol(symbol),
                ),
            )
            conn.commit()
            return cursor.rowcount > 0
        finally:
            conn.close()

    def update_watchlist_thresholds(
        self,
        user_id: int,
        symbol: str,
        above: Optional[Decimal],
        below: Optional[Decimal],
    ) -> bool:
        """Set the advisory thresholds of a watchlist item.

        Returns:
            True if the item exists and was updated.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                UPDATE watchlist_items SET alert_above = ?, alert_below = ?
                WHERE user_id = ? AND symbol = ?
                """,
                (_to_text(above), _to_text(below), user_id, normalize_symbol(symbol)),
            )
            conn.commit()
            return cursor.rowcount > 0
        finally:
            conn.close()

    def delete_watchlist_item(self, user_id: int, symbol: str) -> bool:
        """Remove a symbol from a user's watchlist.

        Returns:
            True if a row was deleted.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "DELETE FROM watchlist_items WHERE user_id = ? AND symbol = ?",
                (user_id, normalize_symbol(symbol)),
            )
            conn.commit()
            return cursor.rowcount > 0
        finally:
            conn.close()

    def list_watchlist(self, user_id: int) -> list[WatchlistItem]:
        """Get a user's watchlist ordered by market type, then symbol."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT * FROM watchlist_items
                WHERE user_id = ?
                ORDER BY market_type, symbol
                """,
                (user_id,),
            )
            return self._load_watchlist_items(cursor.fetchall())
        finally:
            conn.close()

    # ==================== Quotes ====================

    def save_quote(
        self,
        symbol: str,
        price: Decimal,
        change_24h: Optional[Decimal] = None,
        updated_at: Optional[datetime] = None,
    ) -> None:
        """Save or replace the paper quote for a symbol."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT OR REPLACE INTO quotes (symbol, price, change_24h, updated_at)
                VALUES (?, ?, ?, ?)
                """,
                (
                    normalize_symbol(symbol),
                    str(price),
                    _to_text(change_24h),
                    _to_iso(updated_at or utc_now()),
                ),
            )
            conn.commit()
        finally:
            conn.close()

    def get_quote(self, symbol: str) -> Optional[PriceData]:
        """Get the paper quote for a symbol, if one was recorded."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT symbol, price, change_24h FROM quotes WHERE symbol = ?",
                (normalize_symbol(symbol),),
            )
            row = cursor.fetchone()
            if row:
                return PriceData(
                    symbol=row["symbol"],
                    price=Decimal(row["price"]),
                    change_24h=_to_decimal(row["change_24h"]),
                )
            return None
        finally:
            conn.close()

    # ==================== Stats ====================

    def get_stats(self) -> dict:
        """Get database statistics.

        Returns:
            Dictionary with table record counts.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            stats = {}
            for table in self.REQUIRED_TABLES:
                cursor.execute(f"SELECT COUNT(*) as count FROM {table}")
                stats[table] = cursor.fetchone()["count"]
            return stats
        finally:
            conn.close()
