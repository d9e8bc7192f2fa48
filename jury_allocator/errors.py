"""
Error hierarchy for distribution and ranking.

Every failure is deterministic for a given input: nothing here is worth
retrying with the same parameters. Each error carries the numbers an admin
needs to adjust R, Lmax or the jury roster.
"""

from typing import Any, Hashable


class DistributionError(Exception):
    """Base exception for all allocator errors."""

    def __init__(
        self,
        message: str,
        error_code: str = "DISTRIBUTION_ERROR",
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": {
                "code": self.error_code,
                "message": self.message,
                "details": self.details,
            }
        }


class InvalidParameterError(DistributionError):
    """R, Lmax, a roster or a score is out of range."""

    def __init__(self, parameter: str, value: Any, reason: str) -> None:
        super().__init__(
            message=f"Invalid {parameter}={value!r}: {reason}",
            error_code="INVALID_PARAMETER",
            details={"parameter": parameter, "value": value},
        )
        self.parameter = parameter
        self.value = value


class InfeasibleCapacityError(DistributionError):
    """More ratings are needed than the jury pool can absorb."""

    def __init__(self, total_needed: int, max_capacity: int, jury_count: int, max_per_jury: int) -> None:
        super().__init__(
            message=(
                f"Insufficient capacity: {total_needed} assignments needed, "
                f"but only {max_capacity} slots available "
                f"({jury_count} juries x {max_per_jury} max). "
                f"Increase Lmax or add juries."
            ),
            error_code="INFEASIBLE_CAPACITY",
            details={
                "total_needed": total_needed,
                "max_capacity": max_capacity,
                "jury_count": jury_count,
                "max_per_jury": max_per_jury,
            },
        )
        self.total_needed = total_needed
        self.max_capacity = max_capacity
        self.jury_count = jury_count
        self.max_per_jury = max_per_jury


class InsufficientJuriesError(DistributionError):
    """A film needs more distinct juries than have not yet rated it."""

    def __init__(self, film_id: Hashable, need: int, available: int) -> None:
        super().__init__(
            message=(
                f"Film #{film_id} needs {need} more distinct juries, "
                f"but only {available} have not rated it yet. "
                f"Lower R or add juries."
            ),
            error_code="INSUFFICIENT_JURIES",
            details={"film_id": film_id, "need": need, "available": available},
        )
        self.film_id = film_id
        self.need = need
        self.available = available


class NoEligibleJuryError(DistributionError):
    """
    No jury can take a film mid-run.

    The upfront feasibility check passed, but a greedy strategy used up the
    only juries this film could take. ilp-balanced may still place it.
    """

    def __init__(self, film_id: Hashable, round_number: int | None = None) -> None:
        where = f" in round {round_number}" if round_number is not None else ""
        super().__init__(
            message=(
                f"Cannot assign film #{film_id}{where}: no eligible jury left. "
                f"Check R and Lmax."
            ),
            error_code="NO_ELIGIBLE_JURY",
            details={"film_id": film_id, "round": round_number},
        )
        self.film_id = film_id
        self.round_number = round_number
