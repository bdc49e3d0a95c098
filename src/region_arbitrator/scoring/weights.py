"""Factor weight defaults and validation for the composite score.

The three factor weights must sum to 1.0 (within a small tolerance), be
non-negative, and none may exceed 0.8 so no single factor can dominate
the evaluation outright.
"""

from __future__ import annotations

import math

from region_arbitrator.data.models import FactorWeights

# ---------------------------------------------------------------------------
# Factor display names (single source of truth for all modules)
# ---------------------------------------------------------------------------
LATENCY_NAME = "Latency"
CARBON_NAME = "Carbon"
COST_NAME = "Cost"

# ---------------------------------------------------------------------------
# Default weights
# ---------------------------------------------------------------------------
DEFAULT_CARBON_WEIGHT = 0.40
DEFAULT_LATENCY_WEIGHT = 0.40
DEFAULT_COST_WEIGHT = 0.20

DEFAULT_WEIGHTS = FactorWeights(
    carbon=DEFAULT_CARBON_WEIGHT,
    latency=DEFAULT_LATENCY_WEIGHT,
    cost=DEFAULT_COST_WEIGHT,
)

# ---------------------------------------------------------------------------
# Validation bounds
# ---------------------------------------------------------------------------
WEIGHT_SUM_TOLERANCE = 0.001
MAX_SINGLE_WEIGHT = 0.8


class WeightValidationError(ValueError):
    """Factor weights violate the sum, sign, or cap rules."""


def validate_weights(weights: FactorWeights) -> FactorWeights:
    """Return *weights* unchanged, or raise :class:`WeightValidationError`."""
    values = {"carbon": weights.carbon, "latency": weights.latency, "cost": weights.cost}

    non_finite = [name for name, value in values.items() if not math.isfinite(value)]
    if non_finite:
        raise WeightValidationError(
            f"All factor weights must be finite numbers, got: {', '.join(non_finite)}"
        )

    negative = [name for name, value in values.items() if value < 0]
    if negative:
        raise WeightValidationError(
            f"All factor weights must be non-negative, got negative: {', '.join(negative)}"
        )

    total = sum(values.values())
    if abs(total - 1.0) > WEIGHT_SUM_TOLERANCE:
        raise WeightValidationError(f"Factor weights must sum to 1.0, got {total:.3f}")

    dominant = [name for name, value in values.items() if value > MAX_SINGLE_WEIGHT]
    if dominant:
        raise WeightValidationError(
            f"No single factor weight may exceed {MAX_SINGLE_WEIGHT}: {', '.join(dominant)}"
        )

    return weights
