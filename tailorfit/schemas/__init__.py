from .match import (
    DocumentSections,
    Keyword,
    MatchAnalysis,
    MatchScore,
    MissingKeyword,
    PlacementPlan,
    PlacementPlanItem,
    ScoreBreakdown,
    SectionCounts,
    SectionName,
    SectionSlice,
    TailorResult,
)

__all__ = [
    "Keyword",
    "MissingKeyword",
    "SectionName",
    "SectionSlice",
    "DocumentSections",
    "SectionCounts",
    "ScoreBreakdown",
    "MatchScore",
    "PlacementPlanItem",
    "PlacementPlan",
    "MatchAnalysis",
    "TailorResult",
]
