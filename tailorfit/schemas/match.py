from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

SectionName = Literal["summary", "experience", "skills"]
NextAction = Literal["done", "rewrite_again"]

SECTION_NAMES: tuple[SectionName, ...] = ("summary", "experience", "skills")


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class Keyword(_Frozen):
    term: str = Field(min_length=2)
    weight: int

    @field_validator("weight")
    @classmethod
    def _validate_weight(cls, value: int) -> int:
        if value not in (1, 2, 3):
            raise ValueError("weight must be 1, 2 or 3")
        return value


class MissingKeyword(Keyword):
    match_strength: float = Field(ge=0.0, lt=1.0)


class SectionSlice(_Frozen):
    found: bool
    body: str = ""


class DocumentSections(_Frozen):
    summary: str = ""
    experience: str = ""
    skills: str = ""
    headers_found: list[SectionName] = Field(default_factory=list)

    def body(self, section: SectionName) -> str:
        return getattr(self, section)


class SectionCounts(_Frozen):
    summary: int = Field(default=0, ge=0)
    experience: int = Field(default=0, ge=0)
    skills: int = Field(default=0, ge=0)

    def total(self) -> int:
        return self.summary + self.experience + self.skills

    def bumped(self, section: SectionName) -> "SectionCounts":
        return self.model_copy(update={section: getattr(self, section) + 1})


class ScoreBreakdown(_Frozen):
    coverage: float = Field(ge=0.0)
    placement: float = Field(ge=0.0)
    context: float = Field(ge=0.0)
    penalty: float = Field(ge=0.0)


class MatchScore(_Frozen):
    total: float = Field(ge=0.0, le=100.0)
    breakdown: ScoreBreakdown
    missing: list[MissingKeyword] = Field(default_factory=list)
    term_strengths: dict[str, float] = Field(default_factory=dict)
    section_counts: SectionCounts = Field(default_factory=SectionCounts)
    context_points: int = Field(default=0, ge=0)
    capped: bool = False
    cap_reason: str | None = None
    flags: list[str] = Field(default_factory=list)


class PlacementPlanItem(_Frozen):
    term: str
    weight: int = Field(ge=1, le=3)
    target_section: SectionName
    estimated_coverage_delta: float
    estimated_placement_delta: float
    estimated_context_delta: float


class PlacementPlan(_Frozen):
    items: list[PlacementPlanItem] = Field(default_factory=list)
    projected_total: float = Field(ge=0.0, le=100.0)
    current_total: float = Field(ge=0.0, le=100.0)
    target: float = Field(ge=0.0, le=100.0)


class MatchAnalysis(_Frozen):
    keywords: list[Keyword]
    sections: DocumentSections
    score: MatchScore
    plan: PlacementPlan


class TailorResult(_Frozen):
    original_score: MatchScore
    plan: PlacementPlan
    revised_document: str
    revised_score: MatchScore
    rewrite_applied: bool
    next_action: NextAction
