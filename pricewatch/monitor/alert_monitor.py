"""Alert monitor: the scheduled entry point that evaluates price alerts.

One pass loads every eligible alert, groups them by symbol, fetches each
symbol's price once and evaluates all of that symbol's alerts against the
same snapshot. Failures are contained at the symbol and alert level so a
single bad symbol or record never aborts the pass.
"""

import logging
import time
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Callable, Optional

from pricewatch.db.store import DataStore
from pricewatch.models import (
    Alert,
    AlertOutcome,
    AlertStats,
    MarkResult,
    MarketType,
    MonitorReport,
)
from pricewatch.models.alert import utc_now
from pricewatch.monitor.conditions import evaluate_condition, parse_condition
from pricewatch.monitor.dispatcher import NotificationDispatcher, format_trigger_message
from pricewatch.oracles.base import PriceOracle

logger = logging.getLogger(__name__)

DEFAULT_RETENTION_DAYS = 7


def group_by_symbol(alerts: list[Alert]) -> dict[str, list[Alert]]:
    """Partition alerts by symbol, keeping their relative order."""
    groups: dict[str, list[Alert]] = {}
    for alert in alerts:
        groups.setdefault(alert.symbol, []).append(alert)
    return groups


class AlertMonitor:
    """Evaluates eligible alerts and fires each one at most once."""

    def __init__(
        self,
        store: DataStore,
        oracle: PriceOracle,
        dispatcher: NotificationDispatcher,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """Initialize the monitor.

        Args:
            store: Alert store.
            oracle: Price source.
            dispatcher: Notification dispatcher.
            clock: Returns the current UTC time (defaults to the system clock).
        """
        self._store = store
        self._oracle = oracle
        self._dispatcher = dispatcher
        self._clock = clock or utc_now

    def check_all_alerts(self) -> MonitorReport:
        """Run one monitoring pass over all eligible alerts.

        Returns:
            MonitorReport summarizing the pass.
        """
        started_at = self._clock()
        logger.info("Starting alert check")

        try:
            alerts = self._store.list_eligible()
        except Exception:
            logger.exception("Failed to load eligible alerts")
            return MonitorReport(started_at=started_at, finished_at=self._clock(), errors=1)

        if not alerts:
            logger.info("No active alerts to check")
            return MonitorReport(started_at=started_at, finished_at=self._clock())

        symbols_checked = 0
        unavailable: list[str] = []
        triggered: list[int] = []
        skipped = errors = failed_deliveries = 0

        for symbol, symbol_alerts in group_by_symbol(alerts).items():
            try:
                outcomes = self.check_symbol_alerts(symbol, symbol_alerts)
            except Exception:
                logger.exception("Error checking alerts for %s", symbol)
                errors += 1
                continue

            if outcomes is None:
                unavailable.append(symbol)
                continue
            symbols_checked += 1

            for alert, outcome in outcomes:
                if outcome in (AlertOutcome.TRIGGERED, AlertOutcome.DELIVERY_FAILED):
                    triggered.append(alert.id)
                    if outcome == AlertOutcome.DELIVERY_FAILED:
                        failed_deliveries += 1
                elif outcome in (
                    AlertOutcome.UNKNOWN_CONDITION,
                    AlertOutcome.ALREADY_TRIGGERED,
                ):
                    skipped += 1
                elif outcome == AlertOutcome.ERROR:
                    errors += 1

        report = MonitorReport(
            started_at=started_at,
            finished_at=self._clock(),
            alerts_checked=len(alerts),
            symbols_checked=symbols_checked,
            unavailable_symbols=unavailable,
            triggered=triggered,
            skipped=skipped,
            errors=errors,
            failed_deliveries=failed_deliveries,
        )
        logger.info(
            "Alert check completed: %d alerts, %d symbols, %d triggered, %d unavailable",
            report.alerts_checked,
            report.symbols_checked,
            len(report.triggered),
            len(report.unavailable_symbols),
        )
        return report

    def check_symbol_alerts(
        self, symbol: str, alerts: list[Alert]
    ) -> Optional[list[tuple[Alert, AlertOutcome]]]:
        """Evaluate all alerts of one symbol against a single price.

        Args:
            symbol: The shared symbol.
            alerts: Alerts on that symbol.

        Returns:
            (alert, outcome) pairs, or None if no price was available, in
            which case no alert of the group is evaluated.
        """
        logger.debug("Checking %d alerts for %s", len(alerts), symbol)

        price = self._fetch_price(symbol)
        if price is None:
            logger.warning("Could not get price for %s, skipping %d alerts", symbol, len(alerts))
            return None

        logger.debug("Current %s price: %s", symbol, price)
        return [(alert, self.check_alert(alert, price)) for alert in alerts]

    def check_alert(self, alert: Alert, current_price: Decimal) -> AlertOutcome:
        """Evaluate one alert and trigger it if its condition is met."""
        try:
            condition = parse_condition(alert.condition)
            if condition is None:
                logger.warning(
                    "Unknown alert condition %r on alert %s", alert.condition, alert.id
                )
                return AlertOutcome.UNKNOWN_CONDITION

            if not evaluate_condition(condition, alert.target_value, current_price):
                return AlertOutcome.NOT_MET

            return self.trigger_alert(alert, current_price)
        except Exception:
            logger.exception("Error checking alert %s (%s)", alert.id, alert.symbol)
            return AlertOutcome.ERROR

    def trigger_alert(self, alert: Alert, current_price: Decimal) -> AlertOutcome:
        """Fire an alert: record the transition, then notify the owner.

        The transition is a conditional update; only the caller that wins
        it sends the notification, so an alert is never announced twice.
        A failed delivery leaves the alert triggered.

        Args:
            alert: Alert whose condition is met.
            current_price: Price snapshot that satisfied the condition.

        Returns:
            TRIGGERED, DELIVERY_FAILED, or ALREADY_TRIGGERED.
        """
        market_type = self._classify(alert.symbol)
        triggered_at = self._clock()
        message = format_trigger_message(alert, current_price, market_type, triggered_at)

        result = self._store.mark_triggered(alert.id, message, triggered_at)
        if result == MarkResult.NOT_FOUND:
            logger.warning(
                "Alert %s was removed or deactivated before it could be triggered", alert.id
            )
            return AlertOutcome.ALREADY_TRIGGERED
        if result == MarkResult.ALREADY_TRIGGERED:
            logger.info("Alert %s was already triggered, not notifying again", alert.id)
            return AlertOutcome.ALREADY_TRIGGERED

        delivery = self._dispatcher.notify(alert.user_id, message)
        if not delivery.ok:
            logger.error(
                "Alert %s triggered but notification failed: %s", alert.id, delivery.error
            )
            return AlertOutcome.DELIVERY_FAILED

        logger.info(
            "Alert triggered and sent: id=%s symbol=%s condition=%s target=%s current=%s",
            alert.id,
            alert.symbol,
            alert.condition,
            alert.target_value,
            current_price,
        )
        return AlertOutcome.TRIGGERED

    def cleanup_old_alerts(self, days: int = DEFAULT_RETENTION_DAYS) -> int:
        """Purge triggered alerts older than the retention window.

        Args:
            days: Retention window in days after ``triggered_at``.

        Returns:
            Number of alerts removed (0 if the purge failed).
        """
        try:
            deleted = self._store.purge_triggered_older_than(
                timedelta(days=days), now=self._clock()
            )
        except Exception:
            logger.exception("Error cleaning up alerts")
            return 0

        if deleted > 0:
            logger.info("Cleaned up %d old triggered alerts", deleted)
        return deleted

    def get_alert_stats(self) -> AlertStats:
        """Get alert statistics as of now."""
        return self._store.get_alert_stats(now=self._clock())

    def run_forever(
        self,
        interval: float,
        max_runs: Optional[int] = None,
        sleep: Callable[[float], None] = time.sleep,
        on_report: Optional[Callable[[int, MonitorReport], None]] = None,
    ) -> int:
        """Run monitoring passes back to back, ``interval`` seconds apart.

        Passes never overlap. An exception escaping a pass is logged and
        the loop continues with the next tick.

        Args:
            interval: Seconds to wait between passes.
            max_runs: Stop after this many passes (None runs until interrupted).
            sleep: Sleep function.
            on_report: Called with the pass number and its report.

        Returns:
            Number of passes run.
        """
        runs = 0
        while max_runs is None or runs < max_runs:
            runs += 1
            try:
                report = self.check_all_alerts()
            except Exception:
                logger.exception("Alert check #%d failed", runs)
            else:
                if on_report is not None:
                    on_report(runs, report)

            if max_runs is not None and runs >= max_runs:
                break
            sleep(interval)
        return runs

    def _fetch_price(self, symbol: str) -> Optional[Decimal]:
        try:
            price = self._oracle.current_price(symbol)
        except Exception as e:
            logger.warning("Price lookup for %s failed: %s", symbol, e)
            return None
        if price is None:
            return None
        if not isinstance(price, Decimal):
            price = Decimal(str(price))
        return price

    def _classify(self, symbol: str) -> MarketType:
        try:
            return self._oracle.classify(symbol)
        except Exception as e:
            logger.warning("Could not classify %s: %s", symbol, e)
            return MarketType.UNKNOWN
