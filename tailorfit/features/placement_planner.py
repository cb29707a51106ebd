from __future__ import annotations

import logging

from tailorfit.core.scoring import ScoringConfig, load_scoring_config
from tailorfit.schemas.match import (
    Keyword,
    MatchScore,
    PlacementPlan,
    PlacementPlanItem,
    SectionCounts,
    SectionName,
)

from .match_scorer import finalize_total, placement_score

logger = logging.getLogger(__name__)

# Ties go to the first section listed.
_SECTION_PREFERENCE: tuple[SectionName, ...] = ("experience", "summary", "skills")


def _round(value: float) -> float:
    return round(value, 2)


def plan_placements(
    keywords: list[Keyword],
    score: MatchScore,
    *,
    target: float | None = None,
    max_insertions: int | None = None,
    config: ScoringConfig | None = None,
) -> PlacementPlan:
    """Greedily pick missing terms and target sections until the target is projected.

    Each candidate (in ``score.missing`` order) gets the section with the largest
    coverage + placement + context gain. Section membership from the original
    document is not re-checked, so projected placement can be slightly off.
    """
    config = config or load_scoring_config()
    target = config.target_score if target is None else max(0.0, min(100.0, float(target)))
    limit = config.max_insertions if max_insertions is None else int(max_insertions)

    current_total = score.total
    if current_total >= target or limit <= 0 or not score.missing:
        return PlacementPlan(items=[], projected_total=current_total, current_total=current_total, target=target)

    total_weight = sum(kw.weight for kw in keywords)
    if total_weight <= 0:
        return PlacementPlan(items=[], projected_total=current_total, current_total=current_total, target=target)

    coverage = score.breakdown.coverage
    counts: SectionCounts = score.section_counts
    baseline_placement = placement_score(counts, config)
    context = score.breakdown.context
    penalty = score.breakdown.penalty
    unplanned_must_haves = {
        kw.term for kw in keywords if kw.weight == 3 and score.term_strengths.get(kw.term, 0.0) <= 0.0
    }

    projected = current_total
    items: list[PlacementPlanItem] = []
    for candidate in score.missing:
        if len(items) >= limit or projected >= target:
            break

        coverage_delta = config.coverage_budget * candidate.weight * (1.0 - candidate.match_strength) / total_weight

        best_section: SectionName = _SECTION_PREFERENCE[0]
        best_gain = float("-inf")
        best_placement_delta = 0.0
        best_context_delta = 0.0
        for section in _SECTION_PREFERENCE:
            placement_delta = placement_score(counts.bumped(section), config) - baseline_placement
            context_delta = 0.0
            if section == "experience":
                headroom = max(0.0, config.context_budget - context)
                context_delta = min(config.context_delta_per_insertion, headroom)
            gain = coverage_delta + placement_delta + context_delta
            if gain > best_gain:
                best_section = section
                best_gain = gain
                best_placement_delta = placement_delta
                best_context_delta = context_delta

        items.append(
            PlacementPlanItem(
                term=candidate.term,
                weight=candidate.weight,
                target_section=best_section,
                estimated_coverage_delta=_round(coverage_delta),
                estimated_placement_delta=_round(best_placement_delta),
                estimated_context_delta=_round(best_context_delta),
            )
        )

        coverage = min(config.coverage_budget, coverage + coverage_delta)
        counts = counts.bumped(best_section)
        baseline_placement = placement_score(counts, config)
        context = min(config.context_budget, context + best_context_delta)
        unplanned_must_haves.discard(candidate.term)
        projected = finalize_total(
            coverage + baseline_placement + context - penalty,
            bool(unplanned_must_haves),
            config,
        )

    logger.debug(
        "placement_planned current=%s projected=%s items=%s target=%s",
        current_total,
        projected,
        len(items),
        target,
    )
    return PlacementPlan(items=items, projected_total=projected, current_total=current_total, target=target)
