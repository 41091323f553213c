"""Outcome values returned by store, monitor and watchlist operations."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from pricewatch.models.watchlist import WatchlistItem


class MarkResult(str, Enum):
    """Result of the one-way triggered transition."""

    SUCCESS = "success"
    ALREADY_TRIGGERED = "already_triggered"
    NOT_FOUND = "not_found"


class AlertOutcome(str, Enum):
    """Result of evaluating a single alert."""

    TRIGGERED = "triggered"
    DELIVERY_FAILED = "delivery_failed"
    NOT_MET = "not_met"
    UNKNOWN_CONDITION = "unknown_condition"
    ALREADY_TRIGGERED = "already_triggered"
    ERROR = "error"


class WatchlistStatus(str, Enum):
    """Status of an interactive watchlist operation."""

    OK = "ok"
    CAPACITY_EXCEEDED = "capacity_exceeded"
    NOT_FOUND = "not_found"
    INVALID_SYMBOL = "invalid_symbol"


class WatchlistResult(BaseModel):
    """Outcome of add/remove/set_alert on a watchlist."""

    status: WatchlistStatus
    item: Optional[WatchlistItem] = None
    message: str = ""

    model_config = {"frozen": True}

    @property
    def ok(self) -> bool:
        return self.status == WatchlistStatus.OK


class DeliveryResult(BaseModel):
    """Outcome of a notification send."""

    ok: bool
    error: Optional[str] = None

    model_config = {"frozen": True}


class MonitorReport(BaseModel):
    """Aggregate result of one alert monitoring pass."""

    started_at: datetime
    finished_at: datetime
    alerts_checked: int = Field(default=0, ge=0)
    symbols_checked: int = Field(default=0, ge=0)
    unavailable_symbols: list[str] = Field(default_factory=list)
    triggered: list[int] = Field(default_factory=list, description="Triggered alert IDs")
    skipped: int = Field(default=0, ge=0, description="Alerts skipped (bad condition, lost race)")
    errors: int = Field(default=0, ge=0, description="Unexpected failures caught")
    failed_deliveries: int = Field(default=0, ge=0)

    model_config = {"frozen": True}
