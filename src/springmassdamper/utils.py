from __future__ import annotations

from typing import Optional

from springmassdamper.model.errors import ControllerSingularity


def checked_divide(
    numerator: float,
    denominator: float,
    quantity: str,
    iteration: Optional[int] = None,
) -> float:
    """
    Divide two floats, refusing an exactly zero denominator.

    Args:
        numerator: Dividend.
        denominator: Divisor.
        quantity: Name of the divisor, used in the error message.
        iteration: Tuning iteration index reported with the error.

    Returns:
        numerator / denominator

    Raises:
        ControllerSingularity: If the denominator is zero.
    """
    if denominator == 0.0:
        raise ControllerSingularity(quantity=quantity, iteration=iteration)
    return numerator / denominator
