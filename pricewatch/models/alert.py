"""Alert data model."""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class AlertCondition(str, Enum):
    """Supported alert conditions."""

    ABOVE = "above"
    BELOW = "below"
    CROSSES_ABOVE = "crosses_above"
    CROSSES_BELOW = "crosses_below"

    @property
    def phrase(self) -> str:
        """Human readable phrase used in notifications."""
        return _CONDITION_PHRASES[self]


_CONDITION_PHRASES = {
    AlertCondition.ABOVE: "went above",
    AlertCondition.BELOW: "went below",
    AlertCondition.CROSSES_ABOVE: "crossed above",
    AlertCondition.CROSSES_BELOW: "crossed below",
}


def normalize_symbol(symbol: str) -> str:
    """Normalize a symbol to its stored form (trimmed, upper-case)."""
    return symbol.strip().upper()


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class Alert(BaseModel):
    """Represents a user-defined price alert."""

    id: Optional[int] = Field(default=None, description="Database ID")
    user_id: int = Field(..., description="Owner of the alert")
    symbol: str = Field(..., min_length=1, description="Instrument symbol")
    condition: str = Field(
        ..., description="Alert condition (above, below, crosses_above, crosses_below)"
    )
    target_value: Decimal = Field(..., gt=0, description="Price threshold")
    is_active: bool = Field(default=True, description="Whether alert is evaluated")
    is_triggered: bool = Field(default=False, description="Whether alert has fired")
    triggered_at: Optional[datetime] = Field(
        default=None, description="When the alert fired"
    )
    message: Optional[str] = Field(
        default=None, description="Notification text sent when the alert fired"
    )
    created_at: datetime = Field(
        default_factory=utc_now, description="Alert creation timestamp"
    )

    model_config = {"frozen": True}

    @field_validator("symbol", mode="before")
    @classmethod
    def _normalize_symbol(cls, value: str) -> str:
        if isinstance(value, str):
            return normalize_symbol(value)
        return value

    @property
    def is_eligible(self) -> bool:
        """Eligible for evaluation: active and not yet triggered."""
        return self.is_active and not self.is_triggered


class AlertStats(BaseModel):
    """Aggregate alert counts."""

    total_active: int = Field(..., ge=0, description="Active, untriggered alerts")
    total_triggered_today: int = Field(
        ..., ge=0, description="Alerts triggered since UTC midnight"
    )
    by_symbol: dict[str, int] = Field(
        default_factory=dict, description="Active alert count per symbol"
    )

    model_config = {"frozen": True}
