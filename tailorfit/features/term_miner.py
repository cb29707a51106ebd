from __future__ import annotations

import logging
import math
import re
from collections import Counter

from tailorfit.core.errors import require_text
from tailorfit.core.scoring import ScoringConfig, load_scoring_config
from tailorfit.schemas.match import Keyword
from tailorfit.taxonomy import TaxonomyProvider, get_default_taxonomy_provider

from .text_utils import is_valid_gram, ngrams, phrase_in, quantile, split_units, token_runs

logger = logging.getLogger(__name__)

_TITLE_HINTS = (re.compile(r"^role\b", re.IGNORECASE), re.compile(r"^title\b", re.IGNORECASE))
_REQUIRED_HINT_RE = re.compile(r"\b(must|required|minimum|qualifications|requirements)\b", re.IGNORECASE)
_RESPONSIBILITY_HINT_RE = re.compile(
    r"(responsibilities|what you['’]ll do|you will|about the role)", re.IGNORECASE
)
_NICE_HINT_RE = re.compile(r"(nice to have|nice-to-have|preferred|bonus)", re.IGNORECASE)


def line_base_weight(line: str, index: int, config: ScoringConfig) -> float:
    """Context weight of one requirement line (or sentence)."""
    if index == 0 or any(rx.search(line) for rx in _TITLE_HINTS):
        return config.base_title
    if _NICE_HINT_RE.search(line):
        return config.base_nice_to_have
    if _REQUIRED_HINT_RE.search(line):
        return config.base_required
    if _RESPONSIBILITY_HINT_RE.search(line):
        return config.base_responsibilities
    return config.base_default


def _unit_grams(unit: str, taxonomy: TaxonomyProvider, config: ScoringConfig) -> list[str]:
    grams: list[str] = []
    for run in token_runs(unit, taxonomy.is_stopword, taxonomy.lexicon.joined_tokens):
        for gram in ngrams(run, config.max_ngram):
            if is_valid_gram(gram, taxonomy.is_stopword):
                grams.append(taxonomy.canonicalize(gram))
    return grams


def _accumulate_weights(units: list[str], taxonomy: TaxonomyProvider, config: ScoringConfig) -> dict[str, float]:
    weights: dict[str, float] = {}
    for index, unit in enumerate(units):
        base = line_base_weight(unit, index, config)
        local = Counter(_unit_grams(unit, taxonomy, config))
        for term, freq in local.items():
            weights[term] = weights.get(term, 0.0) + base * (1 + math.log(1 + freq))

    if units:
        for term in set(_unit_grams(units[0], taxonomy, config)):
            weights[term] = weights.get(term, 0.0) + config.title_boost
    return weights


def _backfill(
    weights: dict[str, float],
    requirement_lower: str,
    taxonomy: TaxonomyProvider,
    config: ScoringConfig,
) -> dict[str, float]:
    filled = dict(weights)
    for fallback in taxonomy.lexicon.fallback_terms:
        if not phrase_in(requirement_lower, fallback):
            continue
        term = taxonomy.canonicalize(fallback)
        if term in filled:
            continue
        filled[term] = config.base_default * (1 + math.log(2))
    return filled


def _tier(weight: float, low: float, high: float) -> int:
    if weight >= high:
        return 3
    if weight >= low:
        return 2
    return 1


def mine_keywords(
    requirement_text: str,
    *,
    taxonomy: TaxonomyProvider | None = None,
    config: ScoringConfig | None = None,
) -> list[Keyword]:
    """Extract weighted canonical keywords from a requirement text.

    Lines are split into sentences and weighted by context (first line and
    must/required lines highest, nice-to-have lowest). Every 1..max_ngram gram
    inside a stopword-free token run accumulates ``base * (1 + ln(1 + freq))``.
    The strongest ``top_n`` terms are banded into weights 1-3 by the 33rd and
    66th percentile of their accumulated weight.
    """
    text = require_text(requirement_text, "requirement_text")
    taxonomy = taxonomy or get_default_taxonomy_provider()
    config = config or load_scoring_config()

    units = split_units(text)
    weights = _accumulate_weights(units, taxonomy, config)
    survivors = {
        term: weight
        for term, weight in weights.items()
        if weight > config.min_total_weight and is_valid_gram(term, taxonomy.is_stopword)
    }
    if len(survivors) < config.min_terms_before_backfill:
        survivors = _backfill(survivors, text.lower(), taxonomy, config)

    ranked = sorted(survivors.items(), key=lambda item: (-item[1], item[0]))[: config.top_n]
    retained = [weight for _, weight in ranked]
    low = quantile(retained, config.tier_low_quantile)
    high = quantile(retained, config.tier_high_quantile)

    tiers: dict[str, int] = {}
    for term, weight in ranked:
        canonical = taxonomy.canonicalize(term)
        tiers[canonical] = max(tiers.get(canonical, 0), _tier(weight, low, high))

    keywords = [Keyword(term=term, weight=weight) for term, weight in tiers.items()]
    keywords.sort(key=lambda kw: (-kw.weight, kw.term))
    logger.debug(
        "keywords_mined units=%s candidates=%s kept=%s lexicon=%s",
        len(units),
        len(weights),
        len(keywords),
        taxonomy.lexicon.version,
    )
    return keywords
