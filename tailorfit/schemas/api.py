from __future__ import annotations

from pydantic import BaseModel, Field

from .match import DocumentSections, Keyword, MatchScore


class MatchRequest(BaseModel):
    document_text: str = Field(min_length=1, max_length=50000)
    requirement_text: str = Field(min_length=1, max_length=50000)


class PlanRequest(MatchRequest):
    target: float | None = Field(default=None, ge=0.0, le=100.0)
    max_insertions: int | None = Field(default=None, ge=0, le=50)


class ScoreResponse(BaseModel):
    keywords: list[Keyword]
    sections: DocumentSections
    score: MatchScore
