from fastapi import APIRouter, Depends, HTTPException, Request

from tailorfit.core.errors import InsufficientInputError
from tailorfit.core.config import settings
from tailorfit.core.rate_limit import rate_limit
from tailorfit.features import mine_keywords, score_match, segment_document
from tailorfit.schemas.api import MatchRequest, PlanRequest, ScoreResponse
from tailorfit.schemas.match import MatchAnalysis, TailorResult
from tailorfit.services.match_service import Rewriter, analyze_match, tailor_document
from tailorfit.services.rewrite_llm import OpenAIRewriter

router = APIRouter()


def get_rewriter() -> Rewriter:
    return OpenAIRewriter()


def _raise_input_error(exc: InsufficientInputError) -> None:
    raise HTTPException(
        status_code=422,
        detail={"error": "insufficient_input", "field": exc.field, "message": str(exc)},
    ) from exc


@router.post("/match/score", response_model=ScoreResponse)
@rate_limit()
async def match_score(request: Request, payload: MatchRequest):
    try:
        keywords = mine_keywords(payload.requirement_text)
        sections = segment_document(payload.document_text)
        score = score_match(payload.document_text, keywords, sections)
    except InsufficientInputError as exc:
        _raise_input_error(exc)
    return ScoreResponse(keywords=keywords, sections=sections, score=score)


@router.post("/match/plan", response_model=MatchAnalysis)
@rate_limit()
async def match_plan(request: Request, payload: PlanRequest):
    try:
        return analyze_match(
            payload.document_text,
            payload.requirement_text,
            target=payload.target,
            max_insertions=payload.max_insertions,
        )
    except InsufficientInputError as exc:
        _raise_input_error(exc)


@router.post("/match/tailor", response_model=TailorResult)
@rate_limit(settings.tailor_rate_limit)
def match_tailor(request: Request, payload: PlanRequest, rewriter: Rewriter = Depends(get_rewriter)):
    try:
        return tailor_document(
            payload.document_text,
            payload.requirement_text,
            rewriter,
            target=payload.target,
            max_insertions=payload.max_insertions,
        )
    except InsufficientInputError as exc:
        _raise_input_error(exc)
