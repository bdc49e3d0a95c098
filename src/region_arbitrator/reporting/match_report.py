# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Plain-text referee match report.

The output is deterministic for a given list of verdicts, weights and
generation timestamp, so it can be diffed, archived, or pasted into a
ticket.  Verdicts are expected in ranked order (greenest first), as
returned by ``RegionArbitrator.evaluate_many``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Sequence

from region_arbitrator.data.models import (
    ArbitratorVerdict,
    FactorWeights,
    Verdict,
    utc_now,
)

REPORT_HEADER = "REFEREE MATCH REPORT"
REASON_PREVIEW_CHARS = 120

_RULE = "=" * 60
_SUBRULE = "-" * 30


def _plural(count: int, noun: str = "region") -> str:
    return f"{count} {noun}{'' if count == 1 else 's'}"


def _short_reason(reason: str) -> str:
    if len(reason) > REASON_PREVIEW_CHARS:
        return reason[:REASON_PREVIEW_CHARS] + "..."
    return reason


def _weights_line(weights: FactorWeights) -> str:
    return (
        f"Configuration: Carbon {round(weights.carbon * 100)}%, "
        f"Latency {round(weights.latency * 100)}%, "
        f"Cost {round(weights.cost * 100)}%"
    )


def count_verdicts(verdicts: Sequence[ArbitratorVerdict]) -> dict[Verdict, int]:
    """Number of regions per verdict, every verdict present."""
    counts = {verdict: 0 for verdict in Verdict}
    for v in verdicts:
        counts[v.verdict] += 1
    return counts


def format_match_report(
    verdicts: Sequence[ArbitratorVerdict],
    weights: FactorWeights,
    title: str = "Cloud Region Evaluation",
    generated_at: datetime | None = None,
) -> str:
    """Build the match report text.

    Structure:
    1. Header with title, timestamp, active weights, region count
    2. Verdict counts
    3. Greenest choice (first scored region)
    4. One detail block per region, in the given order
    5. Recommendations and the final verdict
    """
    timestamp = (generated_at or utc_now()).isoformat()
    parts: list[str] = [REPORT_HEADER, _RULE, f"Report: {title}", f"Generated: {timestamp}"]

    if not verdicts:
        parts += ["", "No regions evaluated."]
        return "\n".join(parts) + "\n"

    parts.append(_weights_line(weights))
    parts.append(f"Regions Evaluated: {len(verdicts)}")

    # --- 1. Summary ---
    counts = count_verdicts(verdicts)
    parts += ["", "MATCH SUMMARY", _SUBRULE]
    parts.append(f"Play On: {_plural(counts[Verdict.play_on])}")
    parts.append(f"Yellow Card: {_plural(counts[Verdict.yellow_card])}")
    parts.append(f"Red Card: {_plural(counts[Verdict.red_card])}")
    if counts[Verdict.blue_card]:
        parts.append(f"Blue Card: {_plural(counts[Verdict.blue_card])} (data unavailable)")

    # --- 2. Greenest choice ---
    scored = [v for v in verdicts if v.verdict is not Verdict.blue_card]
    greenest = scored[0] if scored else None
    parts += ["", "GREENEST CHOICE", _SUBRULE]
    if greenest is None:
        parts.append("No region could be scored.")
    else:
        s = greenest.scores
        parts.append(f"Winner: {greenest.region.display_name}")
        parts.append(f"Verdict: {greenest.verdict.value}")
        parts.append(
            f"Carbon Score: {round(s.carbon.score)}/100 "
            f"({s.carbon.category.value}, {round(s.carbon.renewable_percentage)}% renewable)"
        )
        parts.append(f"Latency Score: {round(s.latency.score)}/100 ({s.latency.category.value})")
        parts.append(f"Cost Score: {round(s.cost.score)}/100 ({s.cost.category.value})")
        parts.append(f"Overall Score: {round(s.composite.overall_score)}/100")
        parts.append(f"Referee Confidence: {greenest.referee_confidence.value}")

    # --- 3. Detail per region ---
    parts += ["", "DETAILED ANALYSIS", _SUBRULE]
    for rank, v in enumerate(verdicts, start=1):
        s = v.scores
        b = s.composite.weighted_breakdown
        location = v.region.location.country
        if v.region.location.city:
            location += f" ({v.region.location.city})"
        parts.append(f"{rank}. {v.region.display_name} ({v.region.region_code})")
        parts.append(f"   Verdict: {v.verdict.value} ({round(s.composite.overall_score)}/100)")
        parts.append(
            f"   Factors: Carbon {round(s.carbon.score)}/100, "
            f"Latency {round(s.latency.score)}/100, Cost {round(s.cost.score)}/100"
        )
        parts.append(
            f"   Weighted: Carbon {round(b.carbon)}pts, "
            f"Latency {round(b.latency)}pts, Cost {round(b.cost)}pts"
        )
        parts.append(f"   Confidence: {v.referee_confidence.value}")
        parts.append(f"   Location: {location}")
        parts.append(f"   Reasoning: {_short_reason(v.reason)}")
        parts.append(f"   Green Path: {v.suggestion.type.value.replace('_', ' ')}")
        parts.append("")

    # --- 4. Recommendations ---
    parts += ["REFEREE RECOMMENDATIONS", _SUBRULE]
    if counts[Verdict.play_on]:
        parts.append(
            f"The Referee approves {_plural(counts[Verdict.play_on])} for immediate deployment."
        )
    if counts[Verdict.yellow_card]:
        n = counts[Verdict.yellow_card]
        verb = "requires" if n == 1 else "require"
        parts.append(f"{_plural(n)} {verb} careful consideration of trade-offs.")
    if counts[Verdict.red_card]:
        parts.append(
            f"{_plural(counts[Verdict.red_card])} should be avoided due to significant concerns."
        )
    if counts[Verdict.blue_card]:
        parts.append(
            f"{_plural(counts[Verdict.blue_card])} cannot be evaluated due to data issues."
        )

    # --- 5. Final verdict ---
    parts += ["", "FINAL VERDICT", _SUBRULE]
    if greenest is None:
        parts.append("The Referee cannot recommend a region until data becomes available.")
    else:
        closing = {
            Verdict.play_on: "This region receives the Referee's full endorsement.",
            Verdict.yellow_card: (
                "While this is the greenest available option, proceed with awareness "
                "of the noted concerns."
            ),
        }.get(
            greenest.verdict,
            "Even as the greenest option, this region has significant issues that "
            "require attention.",
        )
        parts.append(
            f"The Referee recommends {greenest.region.display_name} as the optimal choice, "
            f"balancing environmental responsibility with operational requirements. {closing}"
        )

    parts += ["", _RULE, "Report generated by Region Arbitrator", f"Timestamp: {timestamp}"]
    return "\n".join(parts) + "\n"
