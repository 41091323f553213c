"""Alert condition evaluation."""

from decimal import Decimal
from typing import Optional

from pricewatch.models import AlertCondition


def parse_condition(condition: str) -> Optional[AlertCondition]:
    """Parse a stored condition string.

    Args:
        condition: Condition text (e.g. "above", "Crosses_Below").

    Returns:
        The AlertCondition, or None if the text is not a known condition.
    """
    if not isinstance(condition, str):
        return None
    try:
        return AlertCondition(condition.strip().lower())
    except ValueError:
        return None


def evaluate_condition(
    condition: AlertCondition, target: Decimal, current: Decimal
) -> bool:
    """Evaluate if an alert condition is met.

    ``above``/``below`` are strict, so a price sitting exactly on the
    target does not fire them. ``crosses_above``/``crosses_below`` include
    the boundary so an exact touch between polls is not missed.

    Args:
        condition: The alert condition.
        target: Alert threshold.
        current: Current price of the symbol.

    Returns:
        True if condition is met, False otherwise.
    """
    if condition == AlertCondition.ABOVE:
        return current > target
    elif condition == AlertCondition.BELOW:
        return current < target
    elif condition == AlertCondition.CROSSES_ABOVE:
        return current >= target
    elif condition == AlertCondition.CROSSES_BELOW:
        return current <= target

    return False
