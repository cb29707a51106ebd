from __future__ import annotations

import logging
from typing import Protocol, Sequence

from tailorfit.core.config import settings
from tailorfit.core.errors import require_text
from tailorfit.core.scoring import ScoringConfig, load_scoring_config
from tailorfit.features import mine_keywords, plan_placements, score_match, segment_document
from tailorfit.schemas.match import (
    Keyword,
    MatchAnalysis,
    MatchScore,
    PlacementPlanItem,
    TailorResult,
)
from tailorfit.taxonomy import TaxonomyProvider, get_default_taxonomy_provider

logger = logging.getLogger(__name__)


class Rewriter(Protocol):
    def __call__(
        self,
        document: str,
        requirement: str,
        plan_items: Sequence[PlacementPlanItem],
    ) -> str | None: ...


def score_document(
    document: str,
    keywords: list[Keyword],
    *,
    taxonomy: TaxonomyProvider | None = None,
    config: ScoringConfig | None = None,
) -> MatchScore:
    sections = segment_document(document)
    return score_match(document, keywords, sections, taxonomy=taxonomy, config=config)


def analyze_match(
    document: str,
    requirement: str,
    *,
    target: float | None = None,
    max_insertions: int | None = None,
    taxonomy: TaxonomyProvider | None = None,
    config: ScoringConfig | None = None,
) -> MatchAnalysis:
    """Mine, segment, score and plan for one (document, requirement) pair."""
    require_text(requirement, "requirement_text")
    require_text(document, "document_text")
    taxonomy = taxonomy or get_default_taxonomy_provider()
    config = config or load_scoring_config()

    keywords = mine_keywords(requirement, taxonomy=taxonomy, config=config)
    sections = segment_document(document)
    score = score_match(document, keywords, sections, taxonomy=taxonomy, config=config)
    plan = plan_placements(keywords, score, target=target, max_insertions=max_insertions, config=config)
    return MatchAnalysis(keywords=keywords, sections=sections, score=score, plan=plan)


def _usable_rewrite(candidate: str | None) -> bool:
    if candidate is None:
        return False
    return len("".join(candidate.split())) >= settings.rewrite_min_output_chars


def tailor_document(
    document: str,
    requirement: str,
    rewriter: Rewriter,
    *,
    target: float | None = None,
    max_insertions: int | None = None,
    taxonomy: TaxonomyProvider | None = None,
    config: ScoringConfig | None = None,
) -> TailorResult:
    """Run one rewrite pass guided by the placement plan and rescore the result.

    Any rewriter failure, empty answer or too-short output keeps the original
    document. Call again with the revised document to iterate.
    """
    taxonomy = taxonomy or get_default_taxonomy_provider()
    config = config or load_scoring_config()
    analysis = analyze_match(
        document,
        requirement,
        target=target,
        max_insertions=max_insertions,
        taxonomy=taxonomy,
        config=config,
    )
    plan = analysis.plan
    goal = plan.target

    revised = document
    revised_score = analysis.score
    rewrite_applied = False
    if analysis.score.total < goal and plan.items:
        try:
            candidate = rewriter(document, requirement, plan.items)
        except Exception as exc:  # noqa: BLE001 - original document is the fallback
            logger.warning("tailor_rewrite_failed items=%s: %s", len(plan.items), exc)
            candidate = None

        if _usable_rewrite(candidate):
            revised = candidate or document
            revised_score = score_document(revised, analysis.keywords, taxonomy=taxonomy, config=config)
            rewrite_applied = True
        elif candidate is not None:
            logger.warning("tailor_rewrite_unusable output_len=%s kept_original=true", len(candidate))

    next_action = "done" if revised_score.total >= goal else "rewrite_again"
    logger.info(
        "tailor_completed before=%s after=%s applied=%s next=%s",
        analysis.score.total,
        revised_score.total,
        rewrite_applied,
        next_action,
    )
    return TailorResult(
        original_score=analysis.score,
        plan=plan,
        revised_document=revised,
        revised_score=revised_score,
        rewrite_applied=rewrite_applied,
        next_action=next_action,
    )
