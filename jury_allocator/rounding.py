"""Half-up rounding shared by the load stats and the rating averages."""

from decimal import ROUND_HALF_UP, Decimal

from jury_allocator.config import AVERAGE_DECIMALS


def round_half_up(numerator: int, denominator: int, decimals: int = AVERAGE_DECIMALS) -> float:
    """
    numerator / denominator rounded half away from zero.

    Same result as SQL ROUND(x, 1) and JS toFixed(1) on these averages:
    1.25 -> 1.3, where Python's round() gives 1.2.
    """
    quotient = Decimal(numerator) / Decimal(denominator)
    quantum = Decimal(1).scaleb(-decimals)
    return float(quotient.quantize(quantum, rounding=ROUND_HALF_UP))
