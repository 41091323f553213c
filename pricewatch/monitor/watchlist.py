"""Per-user watchlists with a lazily refreshed price cache."""

import logging
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Callable, Optional

from pricewatch.db.store import DataStore
from pricewatch.models import (
    MarketType,
    PriceData,
    WatchlistItem,
    WatchlistResult,
    WatchlistStatus,
)
from pricewatch.models.alert import normalize_symbol, utc_now
from pricewatch.models.watchlist import DEFAULT_STALE_AFTER
from pricewatch.oracles.base import PriceOracle

logger = logging.getLogger(__name__)

MAX_WATCHLIST_ITEMS = 25

SECTION_HEADERS = {
    MarketType.CRYPTO: "₿ *Crypto*",
    MarketType.STOCK: "📈 *Stocks*",
    MarketType.FOREX: "💱 *Forex*",
}


class WatchlistCache:
    """Bounded per-user watchlists.

    Prices are refreshed lazily: a read refreshes only the items whose
    cached price is older than ``stale_after``. Lookups are best effort and
    a failed lookup never overwrites cached values.
    """

    def __init__(
        self,
        store: DataStore,
        oracle: PriceOracle,
        max_items: int = MAX_WATCHLIST_ITEMS,
        stale_after: timedelta = DEFAULT_STALE_AFTER,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._store = store
        self._oracle = oracle
        self.max_items = max_items
        self.stale_after = stale_after
        self._clock = clock or utc_now

    def add(self, user_id: int, symbol: str, label: Optional[str] = None) -> WatchlistResult:
        """Add a symbol to a user's watchlist, or update it if present.

        Args:
            user_id: Owner.
            symbol: Symbol to track.
            label: Optional annotation.

        Returns:
            WatchlistResult with the stored item on success.
        """
        symbol = normalize_symbol(symbol)
        if not symbol:
            return WatchlistResult(
                status=WatchlistStatus.INVALID_SYMBOL, message="Symbol must not be empty."
            )

        existing = self._store.get_watchlist_item(user_id, symbol)
        if existing is None:
            count = self._store.count_watchlist(user_id)
            if count >= self.max_items:
                return WatchlistResult(
                    status=WatchlistStatus.CAPACITY_EXCEEDED,
                    message=(
                        f"Watchlist limit reached ({count}/{self.max_items}). "
                        "Remove an item first."
                    ),
                )

        market_type = self._classify(symbol)

        price_data = self._lookup(symbol)
        now = self._clock()
        item = WatchlistItem(
            user_id=user_id,
            symbol=symbol,
            market_type=market_type,
            label=label,
            last_price=price_data.price if price_data else None,
            price_change_24h=price_data.change_24h if price_data else None,
            last_checked_at=now if price_data else None,
            created_at=now,
        )
        stored = self._store.upsert_watchlist_item(item)

        verb = "Updated" if existing else "Added"
        return WatchlistResult(
            status=WatchlistStatus.OK,
            item=stored,
            message=f"{verb} {symbol} on your watchlist.",
        )

    def remove(self, user_id: int, symbol: str) -> WatchlistResult:
        """Remove a symbol; removing a non-member reports NOT_FOUND."""
        symbol = normalize_symbol(symbol)
        if self._store.delete_watchlist_item(user_id, symbol):
            return WatchlistResult(
                status=WatchlistStatus.OK, message=f"Removed {symbol} from your watchlist."
            )
        return WatchlistResult(
            status=WatchlistStatus.NOT_FOUND, message=f"{symbol} is not in your watchlist."
        )

    def get(self, user_id: int, refresh: bool = True) -> list[WatchlistItem]:
        """Get a user's watchlist, refreshing stale prices first.

        Args:
            user_id: Owner.
            refresh: Re-fetch prices of stale items.

        Returns:
            Items ordered by market type, then symbol.
        """
        items = self._store.list_watchlist(user_id)
        if not refresh or not items:
            return items

        now = self._clock()
        refreshed = False
        for item in items:
            if not item.is_fresh(now, self.stale_after):
                refreshed = self._refresh_item(item, now) or refreshed

        if refreshed:
            items = self._store.list_watchlist(user_id)
        return items

    def set_alert(
        self,
        user_id: int,
        symbol: str,
        above: Optional[Decimal] = None,
        below: Optional[Decimal] = None,
    ) -> WatchlistResult:
        """Set advisory thresholds on a watchlist item.

        The symbol must already be on the watchlist.
        """
        symbol = normalize_symbol(symbol)
        if not self._store.update_watchlist_thresholds(user_id, symbol, above, below):
            return WatchlistResult(
                status=WatchlistStatus.NOT_FOUND,
                message=(
                    f"Symbol {symbol} is not in your watchlist. "
                    f"Add it first with 'watch add {symbol}'."
                ),
            )
        return WatchlistResult(
            status=WatchlistStatus.OK,
            item=self._store.get_watchlist_item(user_id, symbol),
            message=f"Alert levels updated for {symbol}.",
        )

    def _classify(self, symbol: str) -> MarketType:
        """Classify a symbol for storage; unknown or failed lookups map to crypto."""
        try:
            market_type = self._oracle.classify(symbol)
        except Exception as e:
            logger.warning("Could not classify %s: %s", symbol, e)
            return MarketType.CRYPTO
        if market_type == MarketType.UNKNOWN:
            return MarketType.CRYPTO
        return market_type

    def _lookup(self, symbol: str) -> Optional[PriceData]:
        """Best-effort price lookup; None when no price is available."""
        try:
            data = self._oracle.universal_price_data(symbol)
            if data is not None:
                return data
            price = self._oracle.current_price(symbol)
        except Exception as e:
            logger.debug("Price lookup for %s failed: %s", symbol, e)
            return None
        if price is None:
            return None
        return PriceData(symbol=symbol, price=price)

    def _refresh_item(self, item: WatchlistItem, now: datetime) -> bool:
        try:
            data = self._oracle.universal_price_data(item.symbol)
        except Exception as e:
            logger.debug("Failed to refresh watchlist price for %s: %s", item.symbol, e)
            return False
        if data is None:
            logger.debug("No price available to refresh %s", item.symbol)
            return False

        return self._store.update_watchlist_prices(
            item.user_id, item.symbol, data.price, data.change_24h, now
        )


def format_watch_price(price: Decimal) -> str:
    """Format a price with precision tiered by magnitude."""
    if price >= 1000:
        decimals = 2
    elif price >= 1:
        decimals = 4
    elif price >= Decimal("0.01"):
        decimals = 6
    else:
        decimals = 8
    return f"${price:.{decimals}f}"


def format_change(change: Optional[Decimal]) -> str:
    if change is None:
        return "N/A"
    emoji = "🟢" if change >= 0 else "🔴"
    return f"{emoji} {change:+.2f}%"


def format_watchlist_message(
    items: list[WatchlistItem], max_items: int = MAX_WATCHLIST_ITEMS
) -> str:
    """Render a watchlist as Markdown-style text grouped by market."""
    if not items:
        return "\n".join([
            "👀 *Your Watchlist*",
            "",
            "❌ No items in your watchlist yet",
            "",
            "*Quick Start:*",
            "• `watch add BTC` — Add Bitcoin",
            "• `watch add AAPL` — Add Apple stock",
            "• `watch add EURUSD` — Add EUR/USD forex",
        ])

    lines = [f"👀 *Your Watchlist* ({len(items)}/{max_items})", ""]

    for market_type, header in SECTION_HEADERS.items():
        section = [item for item in items if item.market_type == market_type]
        if not section:
            continue

        lines.append(header)
        for item in section:
            price = format_watch_price(item.last_price) if item.last_price is not None else "N/A"
            label = f" _{item.label}_" if item.label else ""
            lines.append(f"  `{item.symbol}` — {price} {format_change(item.price_change_24h)}{label}")

            levels = []
            if item.alert_above is not None:
                levels.append(f"↑${item.alert_above}")
            if item.alert_below is not None:
                levels.append(f"↓${item.alert_below}")
            if levels:
                lines.append(f"    🔔 {' | '.join(levels)}")
        lines.append("")

    lines.append("━━━━━━━━━━━━━━━━")
    lines.append("➕ `watch add [symbol]` — Add")
    lines.append("➖ `watch remove [symbol]` — Remove")
    lines.append("🔄 `watch list` — Refresh prices")
    return "\n".join(lines)
