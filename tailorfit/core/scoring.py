from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

from tailorfit.core.config import settings

_SCORING_CONFIG_CACHE: dict[str, Any] | None = None
_DEFAULT_SCORING_CONFIG_PATH = Path(__file__).with_name("scoring.yaml")


def _scoring_config_path() -> Path:
    if settings.scoring_config_path:
        return Path(settings.scoring_config_path)
    return _DEFAULT_SCORING_CONFIG_PATH


def read_scoring_file(path: str | Path) -> dict[str, Any]:
    """Read and validate a scoring YAML file without touching the process cache."""
    config_path = Path(path)
    if not config_path.exists():
        raise RuntimeError(f"Scoring config not found at '{config_path}'.")

    try:
        raw = config_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise RuntimeError(f"Failed to read scoring config '{config_path}': {exc}") from exc

    try:
        parsed = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise RuntimeError(f"Invalid YAML in scoring config '{config_path}': {exc}") from exc

    if not isinstance(parsed, dict):
        raise RuntimeError(
            f"Invalid scoring config '{config_path}': expected a top-level mapping."
        )
    return parsed


def get_scoring_config() -> dict[str, Any]:
    """Load the scoring config once per process and cache it."""
    global _SCORING_CONFIG_CACHE

    if _SCORING_CONFIG_CACHE is not None:
        return _SCORING_CONFIG_CACHE

    _SCORING_CONFIG_CACHE = read_scoring_file(_scoring_config_path())
    return _SCORING_CONFIG_CACHE


def _lookup(mapping: dict[str, Any], path: str, default: Any = None) -> Any:
    if not path:
        return default

    current: Any = mapping
    for key in path.split("."):
        if not isinstance(current, dict):
            return default
        if key not in current:
            return default
        current = current[key]
    return current


def get_scoring_value(path: str, default: Any = None) -> Any:
    """Get nested config value using dot path notation, e.g. 'budgets.coverage'."""
    return _lookup(get_scoring_config(), path, default)


@dataclass(frozen=True)
class SectionPlacement:
    points: float
    target_count: int


@dataclass(frozen=True)
class ScoringConfig:
    version: str
    # mining
    max_ngram: int
    top_n: int
    min_total_weight: float
    min_terms_before_backfill: int
    title_boost: float
    tier_low_quantile: float
    tier_high_quantile: float
    base_title: float
    base_required: float
    base_responsibilities: float
    base_nice_to_have: float
    base_default: float
    # matching
    exact_strength: float
    synonym_strength: float
    stem_strength: float
    # budgets
    coverage_budget: float
    placement_budget: float
    context_budget: float
    penalty_cap: float
    verbosity_word_limit: int
    verbosity_penalty: float
    verbosity_ramp_words: int
    stuffing_share: float
    stuffing_ceiling: float
    summary_placement: SectionPlacement
    experience_placement: SectionPlacement
    skills_placement: SectionPlacement
    points_per_verb_hit: int
    points_per_metric_hit: int
    repeat_threshold: int
    penalty_per_term: float
    stuffing_flag_at: float
    must_have_ceiling: float
    # planner
    target_score: float
    max_insertions: int
    context_delta_per_insertion: float

    def section_placement(self, section: str) -> SectionPlacement:
        if section == "summary":
            return self.summary_placement
        if section == "experience":
            return self.experience_placement
        if section == "skills":
            return self.skills_placement
        raise ValueError(f"Unknown section '{section}'")

    @classmethod
    def from_mapping(cls, raw: dict[str, Any]) -> "ScoringConfig":
        def value(path: str, default: Any) -> Any:
            return _lookup(raw, path, default)

        def placement(section: str, points: float, target: int) -> SectionPlacement:
            return SectionPlacement(
                points=float(value(f"placement.sections.{section}.points", points)),
                target_count=int(value(f"placement.sections.{section}.target_count", target)),
            )

        config = cls(
            version=str(value("version", "unversioned")),
            max_ngram=int(value("mining.max_ngram", 3)),
            top_n=int(value("mining.top_n", 40)),
            min_total_weight=float(value("mining.min_total_weight", 1.2)),
            min_terms_before_backfill=int(value("mining.min_terms_before_backfill", 6)),
            title_boost=float(value("mining.title_boost", 1.5)),
            tier_low_quantile=float(value("mining.tier_quantiles.low", 0.33)),
            tier_high_quantile=float(value("mining.tier_quantiles.high", 0.66)),
            base_title=float(value("mining.base_weights.title", 3)),
            base_required=float(value("mining.base_weights.required", 3)),
            base_responsibilities=float(value("mining.base_weights.responsibilities", 2)),
            base_nice_to_have=float(value("mining.base_weights.nice_to_have", 1)),
            base_default=float(value("mining.base_weights.default", 2)),
            exact_strength=float(value("matching.strengths.exact", 1.0)),
            synonym_strength=float(value("matching.strengths.synonym", 0.85)),
            stem_strength=float(value("matching.strengths.stem", 0.6)),
            coverage_budget=float(value("budgets.coverage", 70)),
            placement_budget=float(value("budgets.placement", 15)),
            context_budget=float(value("budgets.context", 15)),
            penalty_cap=float(value("budgets.penalty_cap", 10)),
            verbosity_word_limit=int(value("coverage.verbosity_word_limit", 1200)),
            verbosity_penalty=float(value("coverage.verbosity_penalty", 2)),
            verbosity_ramp_words=int(value("coverage.verbosity_ramp_words", 1000)),
            stuffing_share=float(value("placement.stuffing_share", 0.6)),
            stuffing_ceiling=float(value("placement.stuffing_ceiling", 7.5)),
            summary_placement=placement("summary", 5, 3),
            experience_placement=placement("experience", 7, 10),
            skills_placement=placement("skills", 3, 10),
            points_per_verb_hit=int(value("context.points_per_verb_hit", 1)),
            points_per_metric_hit=int(value("context.points_per_metric_hit", 1)),
            repeat_threshold=int(value("penalty.repeat_threshold", 3)),
            penalty_per_term=float(value("penalty.points_per_term", 1)),
            stuffing_flag_at=float(value("penalty.stuffing_flag_at", 5)),
            must_have_ceiling=float(value("caps.must_have_ceiling", 85)),
            target_score=float(value("planner.target_score", 95)),
            max_insertions=int(value("planner.max_insertions", 16)),
            context_delta_per_insertion=float(value("planner.context_delta_per_insertion", 2)),
        )
        config.validate()
        return config

    def validate(self) -> None:
        if not 1 <= self.max_ngram <= 5:
            raise RuntimeError("mining.max_ngram must be between 1 and 5")
        if self.top_n <= 0:
            raise RuntimeError("mining.top_n must be greater than 0")
        if not 0.0 <= self.tier_low_quantile <= self.tier_high_quantile <= 1.0:
            raise RuntimeError("mining.tier_quantiles must satisfy 0 <= low <= high <= 1")
        for name in ("coverage_budget", "placement_budget", "context_budget", "penalty_cap"):
            if getattr(self, name) < 0:
                raise RuntimeError(f"{name} must not be negative")
        placement_points = sum(
            item.points
            for item in (self.summary_placement, self.experience_placement, self.skills_placement)
        )
        if placement_points > self.placement_budget:
            raise RuntimeError("placement section points exceed the placement budget")
        if self.verbosity_ramp_words <= 0:
            raise RuntimeError("coverage.verbosity_ramp_words must be greater than 0")
        if not 0.0 <= self.verbosity_penalty <= self.coverage_budget:
            raise RuntimeError("coverage.verbosity_penalty must be between 0 and the coverage budget")
        if not 0.0 <= self.must_have_ceiling <= 100.0:
            raise RuntimeError("caps.must_have_ceiling must be between 0 and 100")


@lru_cache(maxsize=1)
def load_scoring_config() -> ScoringConfig:
    return ScoringConfig.from_mapping(get_scoring_config())
