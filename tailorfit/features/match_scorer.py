from __future__ import annotations

import logging
import re

from tailorfit.core.errors import require_text
from tailorfit.core.scoring import ScoringConfig, load_scoring_config
from tailorfit.schemas.match import (
    SECTION_NAMES,
    DocumentSections,
    Keyword,
    MatchScore,
    MissingKeyword,
    ScoreBreakdown,
    SectionCounts,
)
from tailorfit.taxonomy import TaxonomyProvider, get_default_taxonomy_provider

from .text_utils import count_phrase, phrase_in, split_sentences, stem_in, word_count

logger = logging.getLogger(__name__)

MUST_HAVE_CAP_REASON = "missing required items"
FLAG_STUFFING = "Possible keyword stuffing"
FLAG_MISSING_REQUIRED = "Missing required items"

_METRIC_RE = re.compile(
    r"(?:\d+(?:\.\d+)?\s?%"
    r"|[$€£]\s?\d[\d,]*(?:\.\d+)?(?:\s?[kmb])?"
    r"|\b\d[\d,]*(?:\.\d+)?\s?(?:k|m|x)?\s?"
    r"(?:users|requests|sessions|teams|clients|customers|leads|engineers|people|revenue|"
    r"ms|seconds|minutes|hours|days|weeks|months|tb|gb)\b"
    r"|\b\d+(?:\.\d+)?\s?(?:million|billion|thousand)\b"
    r"|\b(?:qoq|yoy)\b)",
    re.IGNORECASE,
)
_PLACEHOLDER_RE = re.compile(r"\[\s*(?:metrics?|impacts?|results?|verify)\s*\]", re.IGNORECASE)


def match_strength(
    document_lower: str,
    term: str,
    taxonomy: TaxonomyProvider,
    config: ScoringConfig,
) -> float:
    """How strongly a document evidences one canonical term (0.0 to 1.0)."""
    if phrase_in(document_lower, term):
        return config.exact_strength
    if any(phrase_in(document_lower, form) for form in taxonomy.surface_forms(term)):
        return config.synonym_strength
    if stem_in(document_lower, term):
        return config.stem_strength
    return 0.0


def _mentions(text_lower: str, term: str, taxonomy: TaxonomyProvider) -> bool:
    if phrase_in(text_lower, term):
        return True
    return any(phrase_in(text_lower, form) for form in taxonomy.surface_forms(term))


def placement_score(counts: SectionCounts, config: ScoringConfig) -> float:
    """Placement sub-score for a set of per-section distinct keyword counts."""
    score = 0.0
    for section in SECTION_NAMES:
        rule = config.section_placement(section)
        if rule.target_count <= 0:
            continue
        score += rule.points * min(1.0, getattr(counts, section) / rule.target_count)

    total = counts.total()
    if counts.skills > 0 and counts.skills >= config.stuffing_share * total:
        score = min(score, config.stuffing_ceiling)
    return min(score, config.placement_budget)


def verbosity_factor(words: int, config: ScoringConfig) -> float:
    """Share of coverage kept for a document of ``words`` words.

    Past the word limit the reduction ramps in over ``verbosity_ramp_words``
    and is proportional to coverage, so full coverage loses at most
    ``verbosity_penalty`` points. A one-word insertion moves the factor by
    far less than any keyword's coverage gain.
    """
    over = words - config.verbosity_word_limit
    if over <= 0 or config.coverage_budget <= 0:
        return 1.0
    ramp = min(1.0, over / config.verbosity_ramp_words)
    return 1.0 - (config.verbosity_penalty / config.coverage_budget) * ramp


def coverage_score(
    keywords: list[Keyword],
    strengths: dict[str, float],
    words: int,
    config: ScoringConfig,
) -> float:
    total_weight = sum(kw.weight for kw in keywords)
    if total_weight <= 0:
        return 0.0
    matched = sum(kw.weight * strengths.get(kw.term, 0.0) for kw in keywords)
    return config.coverage_budget * matched / total_weight * verbosity_factor(words, config)


def context_points(
    experience: str,
    keywords: list[Keyword],
    taxonomy: TaxonomyProvider,
    config: ScoringConfig,
) -> int:
    verbs = taxonomy.lexicon.action_verbs
    points = 0
    for sentence in split_sentences(experience):
        lowered = sentence.lower()
        if not any(_mentions(lowered, kw.term, taxonomy) for kw in keywords):
            continue
        if not any(phrase_in(lowered, verb) for verb in verbs):
            continue
        points += config.points_per_verb_hit
        if _METRIC_RE.search(sentence) or _PLACEHOLDER_RE.search(sentence):
            points += config.points_per_metric_hit
        if points >= config.context_budget:
            break
    return points


def stuffing_penalty(document_lower: str, keywords: list[Keyword], config: ScoringConfig) -> float:
    penalty = 0.0
    for kw in keywords:
        if count_phrase(document_lower, kw.term) > config.repeat_threshold:
            penalty += config.penalty_per_term
    return min(config.penalty_cap, penalty)


def section_counts(
    sections: DocumentSections,
    keywords: list[Keyword],
    taxonomy: TaxonomyProvider,
) -> SectionCounts:
    counts: dict[str, int] = {}
    for section in SECTION_NAMES:
        body = sections.body(section).lower()
        counts[section] = len({kw.term for kw in keywords if body and _mentions(body, kw.term, taxonomy)})
    return SectionCounts(**counts)


def has_unmatched_must_have(keywords: list[Keyword], strengths: dict[str, float]) -> bool:
    return any(kw.weight == 3 and strengths.get(kw.term, 0.0) <= 0.0 for kw in keywords)


def finalize_total(raw_total: float, capped: bool, config: ScoringConfig) -> float:
    total = max(0.0, min(100.0, raw_total))
    if capped:
        total = min(total, config.must_have_ceiling)
    return round(total, 1)


def score_match(
    document: str,
    keywords: list[Keyword],
    sections: DocumentSections,
    *,
    taxonomy: TaxonomyProvider | None = None,
    config: ScoringConfig | None = None,
) -> MatchScore:
    """Score how well a document aligns with mined keywords.

    total = coverage + placement + context - penalty, clamped to [0, 100] and
    capped at the must-have ceiling whenever a weight-3 keyword has no match
    at all.
    """
    text = require_text(document, "document_text")
    taxonomy = taxonomy or get_default_taxonomy_provider()
    config = config or load_scoring_config()

    lowered = text.lower()
    strengths = {kw.term: match_strength(lowered, kw.term, taxonomy, config) for kw in keywords}

    coverage = coverage_score(keywords, strengths, word_count(text), config)
    counts = section_counts(sections, keywords, taxonomy)
    placement = placement_score(counts, config)
    points = context_points(sections.experience, keywords, taxonomy, config)
    context = min(config.context_budget, float(points))
    penalty = stuffing_penalty(lowered, keywords, config)

    capped = has_unmatched_must_have(keywords, strengths)
    total = finalize_total(coverage + placement + context - penalty, capped, config)

    missing = [
        MissingKeyword(term=kw.term, weight=kw.weight, match_strength=strengths[kw.term])
        for kw in keywords
        if strengths[kw.term] < 1.0
    ]
    missing.sort(key=lambda item: (-item.weight, item.match_strength, item.term))

    flags: list[str] = []
    if penalty >= config.stuffing_flag_at:
        flags.append(FLAG_STUFFING)
    if capped:
        flags.append(FLAG_MISSING_REQUIRED)

    logger.debug(
        "match_scored total=%s coverage=%.2f placement=%.2f context=%.2f penalty=%.2f capped=%s missing=%s",
        total,
        coverage,
        placement,
        context,
        penalty,
        capped,
        len(missing),
    )
    return MatchScore(
        total=total,
        breakdown=ScoreBreakdown(
            coverage=round(coverage, 2),
            placement=round(placement, 2),
            context=round(context, 2),
            penalty=round(penalty, 2),
        ),
        missing=missing,
        term_strengths=strengths,
        section_counts=counts,
        context_points=points,
        capped=capped,
        cap_reason=MUST_HAVE_CAP_REASON if capped else None,
        flags=flags,
    )
